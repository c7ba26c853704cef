"""
Notification creation used by booking, payment, review and chat flows.

In-app notifications are persisted first and pushed afterwards; a failed push
never undoes the row. Email notifications are only queued (status PENDING) for
the mail worker and are not pushed.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..extensions import db
from ..lib.utils import utcnow
from ..models import Notification

if TYPE_CHECKING:
    from ..realtime import OutboundEmitter


def _rubles(amount_minor: int) -> str:
    value = amount_minor / 100
    return f"{value:g} ₽"


class NotificationService:
    def __init__(self, emitter: OutboundEmitter) -> None:
        self.emitter = emitter

    def create_in_app_notification(
        self,
        user_id: int,
        message: str,
        subject: Optional[str] = None,
        action_url: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type="IN_APP",
            subject=subject,
            message=message,
            action_url=action_url,
            data=data,
            status="SENT",
            sent_at=utcnow(),
        )
        try:
            db.session.add(notification)
            db.session.commit()
        except Exception:
            db.session.rollback()
            logging.exception("create_in_app_notification: failed for user=%s", user_id)
            raise

        logging.info("In-app notification %s created for user %s", notification.id, user_id)
        self.emitter.emit_new_notification(notification)
        return notification

    def create_email_notification(
        self,
        user_id: int,
        subject: str,
        message: str,
        template_id: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type="EMAIL",
            subject=subject,
            message=message,
            template_id=template_id,
            data=data,
            status="PENDING",
        )
        try:
            db.session.add(notification)
            db.session.commit()
        except Exception:
            db.session.rollback()
            logging.exception("create_email_notification: failed for user=%s", user_id)
            raise

        logging.info("Email notification %s queued for user %s", notification.id, user_id)
        return notification

    # Templates

    def notify_booking_created(self, client_id, specialist_id, booking_id, specialist_name, date, time):
        self.create_in_app_notification(
            client_id,
            subject="Booking created",
            message=f"Your booking with {specialist_name} on {date} at {time} was created and awaits confirmation.",
            action_url=f"/bookings/{booking_id}",
            data={"bookingId": booking_id, "type": "BOOKING_CREATED"},
        )
        self.create_in_app_notification(
            specialist_id,
            subject="New booking",
            message=f"You have a new booking on {date} at {time}. Please confirm or decline it.",
            action_url=f"/bookings/{booking_id}",
            data={"bookingId": booking_id, "type": "BOOKING_CREATED"},
        )

    def notify_booking_confirmed(self, client_id, booking_id, specialist_name, date, time):
        return self.create_in_app_notification(
            client_id,
            subject="Booking confirmed",
            message=f"{specialist_name} confirmed your booking on {date} at {time}.",
            action_url=f"/bookings/{booking_id}",
            data={"bookingId": booking_id, "type": "BOOKING_CONFIRMED"},
        )

    def notify_booking_cancelled(self, user_id, booking_id, cancelled_by, reason=None):
        who = "the client" if cancelled_by == "client" else "the specialist"
        message = f"The booking was cancelled by {who}."
        if reason:
            message += f" Reason: {reason}"
        return self.create_in_app_notification(
            user_id,
            subject="Booking cancelled",
            message=message,
            action_url=f"/bookings/{booking_id}",
            data={"bookingId": booking_id, "type": "BOOKING_CANCELLED"},
        )

    def notify_new_message(self, recipient_id, sender_id, sender_name, message_preview, room_id):
        return self.create_in_app_notification(
            recipient_id,
            subject="New message",
            message=f"{sender_name}: {message_preview}",
            action_url=f"/chat/{room_id}",
            data={"roomId": room_id, "senderId": sender_id, "type": "NEW_MESSAGE"},
        )

    def notify_payment_received(self, specialist_id, amount, booking_id, client_name):
        return self.create_in_app_notification(
            specialist_id,
            subject="Payment received",
            message=f"Received {_rubles(amount)} from {client_name} for a session.",
            action_url=f"/bookings/{booking_id}",
            data={"bookingId": booking_id, "amount": amount, "type": "PAYMENT_RECEIVED"},
        )

    def notify_withdrawal_completed(self, specialist_id, amount, withdrawal_id):
        return self.create_in_app_notification(
            specialist_id,
            subject="Withdrawal completed",
            message=(
                f"Withdrawal of {_rubles(amount)} is complete. "
                "Funds arrive in your account within 1-3 business days."
            ),
            action_url=f"/withdrawals/{withdrawal_id}",
            data={"withdrawalId": withdrawal_id, "amount": amount, "type": "WITHDRAWAL_COMPLETED"},
        )

    def notify_review_received(self, specialist_id, client_name, rating, review_id):
        return self.create_in_app_notification(
            specialist_id,
            subject="New review",
            message=f"{client_name} left a review rated {rating}/5.",
            action_url=f"/reviews/{review_id}",
            data={"reviewId": review_id, "rating": rating, "type": "REVIEW_RECEIVED"},
        )

    def notify_session_reminder(self, user_id, session_id, participant_name, time):
        return self.create_in_app_notification(
            user_id,
            subject="Session reminder",
            message=f"Your session with {participant_name} starts in 15 minutes (at {time}).",
            action_url=f"/sessions/{session_id}",
            data={"sessionId": session_id, "type": "SESSION_REMINDER"},
        )

    def notify_specialist_approved(self, specialist_id):
        return self.create_in_app_notification(
            specialist_id,
            subject="Profile approved",
            message="Your specialist profile was approved by a moderator. You can now accept bookings!",
            action_url="/dashboard",
            data={"type": "SPECIALIST_APPROVED"},
        )

    def notify_specialist_rejected(self, specialist_id, reason=None):
        if reason:
            message = f"Your specialist profile was rejected. Reason: {reason}"
        else:
            message = "Your specialist profile was rejected. Please contact support for details."
        return self.create_in_app_notification(
            specialist_id,
            subject="Profile rejected",
            message=message,
            action_url="/dashboard",
            data={"type": "SPECIALIST_REJECTED", "reason": reason},
        )
