from __future__ import annotations

import pytest

from hearty.extensions import db
from hearty.models import Notification
from hearty.realtime import Realtime
from hearty.realtime.channels import notifications_channel
from hearty.services import NotificationService

from conftest import add_message, payloads


def test_emitter_is_a_noop_before_init():
    realtime = Realtime()
    assert realtime.emitter.emit_to_user(1, "notification:new", {"id": 1}) is False
    assert realtime.emitter.emit_to_all("user:online", {}) is False


def test_new_message_reaches_joined_connections_only(realtime, people, connect):
    in_r1 = connect(people.client)
    in_r1.emit("chat:join", {"roomId": people.r1.id})
    in_r2 = connect(people.outsider)
    in_r2.emit("chat:join", {"roomId": people.r2.id})
    in_r1.get_received()
    in_r2.get_received()

    message = add_message(people.r1, people.specialist, text="see you at 5")
    assert realtime.emitter.emit_new_message(message) is True

    [pushed] = payloads(in_r1.get_received(), "chat:message:new")
    assert pushed["text"] == "see you at 5"
    assert pushed["chatRoomId"] == people.r1.id
    assert payloads(in_r2.get_received(), "chat:message:new") == []


def test_connection_in_several_target_rooms_gets_one_copy(realtime, people, connect):
    sock = connect(people.client)
    sock.emit("chat:join", {"roomId": people.r1.id})
    sock.get_received()

    message = add_message(people.r1, people.specialist)
    realtime.emitter.emit_new_message(message, recipient_id=people.client.id)

    assert len(payloads(sock.get_received(), "chat:message:new")) == 1


def test_emit_to_user_reaches_every_tab(realtime, people, connect):
    tab_1 = connect(people.client)
    tab_2 = connect(people.client)
    other = connect(people.specialist)
    for sock in (tab_1, tab_2, other):
        sock.get_received()

    realtime.emitter.emit_to_user(people.client.id, "booking:updated", {"bookingId": 3})

    assert payloads(tab_1.get_received(), "booking:updated") == [{"bookingId": 3}]
    assert payloads(tab_2.get_received(), "booking:updated") == [{"bookingId": 3}]
    assert other.get_received() == []


def test_emit_to_all_and_to_room(realtime, people, connect):
    client = connect(people.client)
    specialist = connect(people.specialist)
    specialist.emit("notifications:subscribe")
    client.get_received()
    specialist.get_received()

    realtime.emitter.emit_to_all("maintenance", {"in": 5})
    realtime.emitter.emit_to_room(notifications_channel(people.specialist.id), "digest", {"n": 2})

    assert payloads(client.get_received(), "maintenance") == [{"in": 5}]
    received = specialist.get_received()
    assert payloads(received, "maintenance") == [{"in": 5}]
    assert payloads(received, "digest") == [{"n": 2}]


def test_in_app_notification_is_persisted_and_pushed(realtime, people, connect):
    sock = connect(people.specialist)
    sock.emit("notifications:subscribe")
    sock.get_received()

    service = NotificationService(realtime.emitter)
    notification = service.notify_review_received(people.specialist.id, "Anna Petrova", 5, review_id=11)

    assert notification.id is not None
    assert notification.status == "SENT"
    [pushed] = payloads(sock.get_received(), "notification:new")
    assert pushed["id"] == notification.id
    assert pushed["message"] == "Anna Petrova left a review rated 5/5."
    assert pushed["isRead"] is False


def test_email_notification_is_not_pushed(realtime, people, connect):
    sock = connect(people.client)
    sock.get_received()

    service = NotificationService(realtime.emitter)
    notification = service.create_email_notification(people.client.id, "Receipt", "Thanks for your payment")

    assert notification.status == "PENDING"
    assert sock.get_received() == []


def test_notification_survives_when_push_is_unavailable(people):
    service = NotificationService(Realtime().emitter)
    notification = service.notify_specialist_approved(people.specialist.id)

    assert notification.id is not None
    assert notification.subject == "Profile approved"


TEMPLATE_CASES = [
    (
        "notify_booking_confirmed",
        lambda p: dict(client_id=p.client.id, booking_id=4, specialist_name="Dr. Sokolov", date="2026-11-02", time="10:00"),
        "client",
        "/bookings/4",
        "BOOKING_CONFIRMED",
        "Dr. Sokolov confirmed your booking on 2026-11-02 at 10:00.",
    ),
    (
        "notify_booking_cancelled",
        lambda p: dict(user_id=p.specialist.id, booking_id=4, cancelled_by="client"),
        "specialist",
        "/bookings/4",
        "BOOKING_CANCELLED",
        "The booking was cancelled by the client.",
    ),
    (
        "notify_booking_cancelled",
        lambda p: dict(user_id=p.client.id, booking_id=4, cancelled_by="specialist", reason="illness"),
        "client",
        "/bookings/4",
        "BOOKING_CANCELLED",
        "The booking was cancelled by the specialist. Reason: illness",
    ),
    (
        "notify_payment_received",
        lambda p: dict(specialist_id=p.specialist.id, amount=150000, booking_id=4, client_name="Anna Petrova"),
        "specialist",
        "/bookings/4",
        "PAYMENT_RECEIVED",
        "Received 1500 ₽ from Anna Petrova for a session.",
    ),
    (
        "notify_withdrawal_completed",
        lambda p: dict(specialist_id=p.specialist.id, amount=99950, withdrawal_id=8),
        "specialist",
        "/withdrawals/8",
        "WITHDRAWAL_COMPLETED",
        "Withdrawal of 999.5 ₽ is complete. Funds arrive in your account within 1-3 business days.",
    ),
    (
        "notify_session_reminder",
        lambda p: dict(user_id=p.client.id, session_id=21, participant_name="Dr. Sokolov", time="18:30"),
        "client",
        "/sessions/21",
        "SESSION_REMINDER",
        "Your session with Dr. Sokolov starts in 15 minutes (at 18:30).",
    ),
    (
        "notify_specialist_rejected",
        lambda p: dict(specialist_id=p.specialist.id),
        "specialist",
        "/dashboard",
        "SPECIALIST_REJECTED",
        "Your specialist profile was rejected. Please contact support for details.",
    ),
    (
        "notify_specialist_rejected",
        lambda p: dict(specialist_id=p.specialist.id, reason="diploma unreadable"),
        "specialist",
        "/dashboard",
        "SPECIALIST_REJECTED",
        "Your specialist profile was rejected. Reason: diploma unreadable",
    ),
]


@pytest.mark.parametrize("helper, kwargs, recipient, action_url, kind, text", TEMPLATE_CASES)
def test_notification_templates(realtime, people, connect, helper, kwargs, recipient, action_url, kind, text):
    user = getattr(people, recipient)
    sock = connect(user)
    sock.get_received()

    service = NotificationService(realtime.emitter)
    notification = getattr(service, helper)(**kwargs(people))

    db.session.expire_all()
    stored = db.session.get(Notification, notification.id)
    assert stored.user_id == user.id
    assert stored.action_url == action_url
    assert stored.data["type"] == kind
    assert stored.message == text
    [pushed] = payloads(sock.get_received(), "notification:new")
    assert pushed["id"] == notification.id


def test_booking_created_notifies_both_sides(realtime, people, connect):
    client = connect(people.client)
    specialist = connect(people.specialist)
    client.get_received()
    specialist.get_received()

    NotificationService(realtime.emitter).notify_booking_created(
        people.client.id, people.specialist.id, 4, "Dr. Sokolov", "2026-11-02", "10:00"
    )

    rows = db.session.query(Notification).filter_by(action_url="/bookings/4").order_by(Notification.id).all()
    assert [(n.user_id, n.subject) for n in rows] == [
        (people.client.id, "Booking created"),
        (people.specialist.id, "New booking"),
    ]
    assert all(n.data["type"] == "BOOKING_CREATED" for n in rows)
    [to_client] = payloads(client.get_received(), "notification:new")
    [to_specialist] = payloads(specialist.get_received(), "notification:new")
    assert to_client["id"] == rows[0].id
    assert to_specialist["id"] == rows[1].id
