# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy.orm import Mapped

from ...extensions import db
from ...lib.utils import isoformat, utcnow

if TYPE_CHECKING:
    from ..auth.profile import Client, Specialist
    from .message import Message


# A chat room pairs exactly one client with one specialist; created lazily on first message
class ChatRoom(db.Model):
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    client_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("client.id"), nullable=False, index=True
    )
    specialist_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("specialist.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = db.Column(db.DateTime, default=utcnow)
    # Bumped on every new message so room lists sort by activity
    updated_at: Mapped[datetime] = db.Column(db.DateTime, default=utcnow)

    client: Mapped["Client"] = db.relationship("Client", lazy="joined")
    specialist: Mapped["Specialist"] = db.relationship("Specialist", lazy="joined")
    messages: Mapped[list["Message"]] = db.relationship(
        "Message", back_populates="chat_room", lazy=True, cascade="all, delete-orphan"
    )

    # Membership is immutable: one room per (client, specialist) pair
    __table_args__ = (
        db.UniqueConstraint("client_id", "specialist_id", name="uq_chat_room_client_specialist"),
    )

    @property
    def client_user_id(self) -> int:
        return self.client.user_id

    @property
    def specialist_user_id(self) -> int:
        return self.specialist.user_id

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.client_user_id, self.specialist_user_id)

    def participant_name(self, user_id: int) -> Optional[str]:
        """Display name of a participant as stored on their user record."""
        if user_id == self.client_user_id:
            return self.client.user.full_name
        if user_id == self.specialist_user_id:
            return self.specialist.user.full_name
        return None

    def to_dict(self):
        return {
            "id": self.id,
            "clientId": self.client_id,
            "specialistId": self.specialist_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
