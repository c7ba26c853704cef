# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

# Import all models from the grouped subdirectories
from .auth.user import User
from .auth.profile import Client, Specialist
from .chat.room import ChatRoom
from .chat.message import Message
from .notify.notification import Notification

__all__ = [
    "User",
    "Client",
    "Specialist",
    "ChatRoom",
    "Message",
    "Notification",
]
