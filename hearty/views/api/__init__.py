from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask

from .chat import create_chat_blueprint
from .notifications import create_notifications_blueprint

if TYPE_CHECKING:
    from ...realtime import Realtime

__all__ = ["register_blueprints"]


def register_blueprints(app: Flask, realtime: Realtime) -> None:
    app.register_blueprint(create_chat_blueprint(realtime))
    app.register_blueprint(create_notifications_blueprint(realtime))
