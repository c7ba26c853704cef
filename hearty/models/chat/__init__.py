from .room import ChatRoom
from .message import Message

__all__ = ['ChatRoom', 'Message']
