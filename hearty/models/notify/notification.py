# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Mapped

from ...extensions import db
from ...lib.utils import isoformat, utcnow


# Per-user notification created by internal services
class Notification(db.Model):
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    # Owning user; notifications are private to this user
    user_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("user.id"), nullable=False, index=True
    )
    # IN_APP | EMAIL
    type: Mapped[str] = db.Column(db.String(16), default="IN_APP", nullable=False)
    subject: Mapped[Optional[str]] = db.Column(db.String(255))
    message: Mapped[str] = db.Column(db.Text, nullable=False)
    action_url: Mapped[Optional[str]] = db.Column(db.String(1024))
    # Arbitrary structured payload (booking id, room id, template kind...)
    data: Mapped[Optional[dict]] = db.Column(db.JSON)
    template_id: Mapped[Optional[str]] = db.Column(db.String(64))
    # PENDING | SENT | FAILED
    status: Mapped[str] = db.Column(db.String(16), default="PENDING", nullable=False)
    sent_at: Mapped[Optional[datetime]] = db.Column(db.DateTime)
    # Null means unread
    read_at: Mapped[Optional[datetime]] = db.Column(db.DateTime, index=True)
    created_at: Mapped[datetime] = db.Column(db.DateTime, default=utcnow, index=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "subject": self.subject,
            "message": self.message,
            "actionUrl": self.action_url,
            "data": self.data,
            "isRead": self.is_read,
            "readAt": isoformat(self.read_at),
            "createdAt": isoformat(self.created_at),
        }
