from .user import User
from .profile import Client, Specialist

__all__ = ['User', 'Client', 'Specialist']
