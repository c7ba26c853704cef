# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy.orm import Mapped

from ...extensions import db
from ...lib.utils import isoformat, utcnow

if TYPE_CHECKING:
    from .room import ChatRoom


class Message(db.Model):
    # Surrogate primary key id
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    # Owning room id
    chat_room_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("chat_room.id"), nullable=False, index=True
    )
    # Sender user id
    sender_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("user.id"), nullable=False, index=True
    )
    # Role of the sender at send time: CLIENT | SPECIALIST
    sender_role: Mapped[str] = db.Column(db.String(16), nullable=False)
    # Message text content
    text: Mapped[str] = db.Column(db.Text, nullable=False)
    # List of attachment URLs
    attachments: Mapped[list] = db.Column(db.JSON, default=list)
    is_read: Mapped[bool] = db.Column(db.Boolean, default=False, nullable=False, index=True)
    read_at: Mapped[Optional[datetime]] = db.Column(db.DateTime, nullable=True)
    created_at: Mapped[datetime] = db.Column(db.DateTime, default=utcnow, index=True)

    chat_room: Mapped["ChatRoom"] = db.relationship("ChatRoom", back_populates="messages")

    def mark_read(self, when: Optional[datetime] = None) -> datetime:
        self.is_read = True
        self.read_at = when or utcnow()
        return self.read_at

    def to_dict(self):
        return {
            "id": self.id,
            "chatRoomId": self.chat_room_id,
            "senderId": self.sender_id,
            "senderRole": self.sender_role,
            "text": self.text,
            "attachments": list(self.attachments or []),
            "isRead": bool(self.is_read),
            "readAt": isoformat(self.read_at),
            "createdAt": isoformat(self.created_at),
        }
