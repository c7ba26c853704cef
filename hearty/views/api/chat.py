from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flask import Blueprint, jsonify, request

from ...errors import ApiError
from ...extensions import db
from ...lib.utils import utcnow
from ...models import ChatRoom, Message, User
from ...services import NotificationService
from .common import require_user

if TYPE_CHECKING:
    from ...realtime import Realtime
    from ...security import Identity

MESSAGE_PREVIEW_LENGTH = 100


def _find_or_create_room(client_id: int, specialist_id: int) -> ChatRoom:
    room = (
        db.session.query(ChatRoom)
        .filter_by(client_id=client_id, specialist_id=specialist_id)
        .first()
    )
    if room is None:
        room = ChatRoom(client_id=client_id, specialist_id=specialist_id)
        db.session.add(room)
        db.session.flush()
    return room


def create_chat_blueprint(realtime: Realtime) -> Blueprint:
    chat_bp = Blueprint("chat", __name__, url_prefix="/api/chat")
    notifications = NotificationService(realtime.emitter)

    @chat_bp.route("/messages", methods=["POST"])
    @require_user
    def send_message(identity: Identity):
        body = request.get_json(silent=True) or {}
        recipient_id = body.get("recipientId")
        text = body.get("text")
        if not recipient_id or not isinstance(text, str):
            raise ApiError("recipientId and text are required", 400)
        if not text.strip():
            raise ApiError("Message text cannot be empty", 400)

        sender = db.session.get(User, identity.user_id)
        if sender is None:
            raise ApiError("User not found", 404)
        try:
            recipient = db.session.get(User, int(recipient_id))
        except (TypeError, ValueError):
            recipient = None
        if recipient is None:
            raise ApiError("Recipient not found", 404)

        if sender.role == "CLIENT" and recipient.role == "SPECIALIST" and sender.client and recipient.specialist:
            client_id, specialist_id = sender.client.id, recipient.specialist.id
        elif sender.role == "SPECIALIST" and recipient.role == "CLIENT" and sender.specialist and recipient.client:
            client_id, specialist_id = recipient.client.id, sender.specialist.id
        else:
            raise ApiError("Chat is only available between clients and specialists", 400)

        room = _find_or_create_room(client_id, specialist_id)
        message = Message(
            chat_room_id=room.id,
            sender_id=sender.id,
            sender_role=sender.role,
            text=text.strip(),
            attachments=list(body.get("attachments") or []),
        )
        db.session.add(message)
        room.updated_at = utcnow()
        db.session.commit()

        # Persisted; everything below is best-effort delivery
        realtime.emitter.emit_new_message(message, recipient_id=recipient.id)
        try:
            notifications.notify_new_message(
                recipient_id=recipient.id,
                sender_id=sender.id,
                sender_name=sender.full_name,
                message_preview=message.text[:MESSAGE_PREVIEW_LENGTH],
                room_id=room.id,
            )
        except Exception:
            logging.exception("send_message: new-message notification failed (message=%s)", message.id)

        return jsonify({"message": "Message sent successfully", "data": message.to_dict()}), 201

    @chat_bp.route("/rooms/<int:room_id>/messages", methods=["GET"])
    @require_user
    def room_messages(identity: Identity, room_id: int):
        room = realtime.guard.find_chat_room(identity.user_id, room_id)
        if room is None:
            raise ApiError("Chat room not found or access denied", 404)
        limit = min(max(request.args.get("limit", 50, type=int), 1), 200)
        messages = (
            db.session.query(Message)
            .filter_by(chat_room_id=room.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .all()
        )
        return jsonify({"room": room.to_dict(), "messages": [m.to_dict() for m in reversed(messages)]})

    @chat_bp.route("/messages/<int:message_id>/read", methods=["PUT"])
    @require_user
    def mark_message_read(identity: Identity, message_id: int):
        message = db.session.get(Message, message_id)
        if message is None:
            raise ApiError("Message not found", 404)
        if message.sender_id == identity.user_id:
            raise ApiError("Cannot mark own message as read", 400)
        if not message.chat_room.has_participant(identity.user_id):
            raise ApiError("Access denied", 403)

        message.mark_read()
        db.session.commit()
        realtime.emitter.emit_message_read(message, read_by=identity.user_id)
        return jsonify({"message": "Message marked as read", "data": message.to_dict()})

    return chat_bp
