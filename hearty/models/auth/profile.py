# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from sqlalchemy.orm import Mapped

from ...extensions import db

if TYPE_CHECKING:
    from .user import User


# Client profile attached to a user with role CLIENT
class Client(db.Model):
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    # Owning user; one profile per user
    user_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("user.id"), nullable=False, unique=True, index=True
    )
    user: Mapped["User"] = db.relationship("User", back_populates="client")


# Specialist profile attached to a user with role SPECIALIST
class Specialist(db.Model):
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    user_id: Mapped[int] = db.Column(
        db.Integer, db.ForeignKey("user.id"), nullable=False, unique=True, index=True
    )
    # Public display name; may differ from the user's own name
    name: Mapped[str] = db.Column(db.String(255), default="")
    specialty: Mapped[Optional[str]] = db.Column(db.String(255))
    image: Mapped[Optional[str]] = db.Column(db.String(1024))

    user: Mapped["User"] = db.relationship("User", back_populates="specialist")


__all__ = ["Client", "Specialist"]
