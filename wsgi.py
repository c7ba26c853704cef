from __future__ import annotations

from hearty import create_app

# Instantiate the application at import time for WSGI servers
app = create_app()


if __name__ == "__main__":
    realtime = app.extensions["realtime"]
    realtime.socketio.run(app, host="0.0.0.0", port=app.config["PORT"])
