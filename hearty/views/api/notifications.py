from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Blueprint, jsonify, request

from ...errors import ApiError
from ...extensions import db
from ...lib.utils import utcnow
from ...models import Notification
from .common import require_user

if TYPE_CHECKING:
    from ...realtime import Realtime
    from ...security import Identity


def create_notifications_blueprint(realtime: Realtime) -> Blueprint:
    notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")

    @notifications_bp.route("", methods=["GET"])
    @require_user
    def list_notifications(identity: Identity):
        limit = min(max(request.args.get("limit", 20, type=int), 1), 100)
        unread_only = request.args.get("unreadOnly", "false").lower() == "true"
        query = db.session.query(Notification).filter(
            Notification.user_id == identity.user_id, Notification.type == "IN_APP"
        )
        if unread_only:
            query = query.filter(Notification.read_at.is_(None))
        rows = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()
        return jsonify({"notifications": [n.to_dict() for n in rows]})

    @notifications_bp.route("/unread-count", methods=["GET"])
    @require_user
    def unread_count(identity: Identity):
        count = (
            db.session.query(Notification)
            .filter(Notification.user_id == identity.user_id, Notification.read_at.is_(None))
            .count()
        )
        return jsonify({"count": count})

    @notifications_bp.route("/<int:notification_id>/read", methods=["PUT"])
    @require_user
    def mark_read(identity: Identity, notification_id: int):
        notification = db.session.get(Notification, notification_id)
        if notification is None:
            raise ApiError("Notification not found", 404)
        if notification.user_id != identity.user_id:
            raise ApiError("Access denied to this notification", 403)
        if notification.is_read:
            return jsonify({"message": "Notification already marked as read"})

        notification.read_at = utcnow()
        db.session.commit()
        realtime.emitter.emit_notification_update(notification)
        return jsonify({"message": "Notification marked as read", "data": notification.to_dict()})

    @notifications_bp.route("/read-all", methods=["PUT"])
    @require_user
    def mark_all_read(identity: Identity):
        count = (
            db.session.query(Notification)
            .filter(Notification.user_id == identity.user_id, Notification.read_at.is_(None))
            .update({Notification.read_at: utcnow()}, synchronize_session=False)
        )
        db.session.commit()
        return jsonify({"message": "All notifications marked as read", "data": {"count": count}})

    return notifications_bp
