# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy.orm import Mapped

from ...extensions import db
from ...lib.utils import utcnow

if TYPE_CHECKING:
    from .profile import Client, Specialist


# User accounts persisted in the database
class User(db.Model):
    # Surrogate primary key integer id
    id: Mapped[int] = db.Column(db.Integer, primary_key=True)
    # Email address; unique to prevent duplicates
    email: Mapped[str] = db.Column(db.String(255), unique=True, nullable=False)
    first_name: Mapped[str] = db.Column(db.String(120), default="")
    last_name: Mapped[str] = db.Column(db.String(120), default="")
    # CLIENT | SPECIALIST | ADMIN
    role: Mapped[str] = db.Column(db.String(16), default="CLIENT", nullable=False)
    # ACTIVE | BLOCKED | PENDING
    status: Mapped[str] = db.Column(db.String(16), default="ACTIVE", nullable=False)
    # Profile picture URL
    avatar: Mapped[Optional[str]] = db.Column(db.String(1024))
    created_at: Mapped[datetime] = db.Column(db.DateTime, default=utcnow)

    # One-to-one role profiles; at most one of them is set for a regular user
    client: Mapped[Optional["Client"]] = db.relationship(
        "Client", back_populates="user", uselist=False
    )
    specialist: Mapped[Optional["Specialist"]] = db.relationship(
        "Specialist", back_populates="user", uselist=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
