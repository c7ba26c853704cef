import os

# Bind address for the local reverse proxy
bind = os.getenv("BIND", "127.0.0.1:3001")
# Presence and room membership live in process memory: exactly one worker
workers = 1
# Time to gracefully stop workers on restart/shutdown
graceful_timeout = 5
# Use Gevent WebSocket worker to support Flask-SocketIO
worker_class = "geventwebsocket.gunicorn.workers.GeventWebSocketWorker"
# WSGI app module path for Gunicorn to load
wsgi_app = "wsgi:app"

# Kill and restart workers that block beyond this many seconds
timeout = 120
# Logging level for Gunicorn (defaults to INFO, can be overridden via LOG_LEVEL env var)
loglevel = os.getenv("LOG_LEVEL", "info").lower()
# Capture stdout/stderr of workers into Gunicorn logs
capture_output = True
