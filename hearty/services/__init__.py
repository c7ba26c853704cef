from .notifications import NotificationService

__all__ = ["NotificationService"]
