from __future__ import annotations

import pytest

from hearty.extensions import db
from hearty.models import ChatRoom, Message, Notification

from conftest import add_message, add_notifications, payloads


@pytest.fixture
def http(app):
    return app.test_client()


def test_health_reports_realtime_ready(http):
    response = http.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "realtime": True}


def test_requests_without_token_are_rejected(http, people):
    assert http.get("/api/notifications").status_code == 401
    response = http.post("/api/chat/messages", json={"recipientId": people.specialist.id, "text": "hi"})
    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}


def test_send_message_persists_and_pushes(http, auth_headers, people, connect):
    specialist = connect(people.specialist)
    specialist.emit("notifications:subscribe")
    specialist.get_received()

    response = http.post(
        "/api/chat/messages",
        json={"recipientId": people.specialist.id, "text": "  Hello doctor  "},
        headers=auth_headers(people.client),
    )

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["text"] == "Hello doctor"
    assert data["chatRoomId"] == people.r1.id
    assert db.session.get(Message, data["id"]) is not None

    received = specialist.get_received()
    [pushed] = payloads(received, "chat:message:new")
    assert pushed["id"] == data["id"]
    [notification] = payloads(received, "notification:new")
    assert notification["message"] == "Anna Petrova: Hello doctor"
    assert notification["actionUrl"] == f"/chat/{people.r1.id}"


def test_send_message_creates_room_for_new_pair(http, auth_headers, people):
    response = http.post(
        "/api/chat/messages",
        json={"recipientId": people.other_specialist.id, "text": "first contact"},
        headers=auth_headers(people.client),
    )

    assert response.status_code == 201
    room = db.session.get(ChatRoom, response.get_json()["data"]["chatRoomId"])
    assert room.client_user_id == people.client.id
    assert room.specialist_user_id == people.other_specialist.id


@pytest.mark.parametrize(
    "body, status, error",
    [
        ({"text": "hi"}, 400, "recipientId and text are required"),
        ({"recipientId": 2, "text": "   "}, 400, "Message text cannot be empty"),
        ({"recipientId": 999, "text": "hi"}, 404, "Recipient not found"),
    ],
)
def test_send_message_validation(http, auth_headers, people, body, status, error):
    response = http.post("/api/chat/messages", json=body, headers=auth_headers(people.client))
    assert response.status_code == status
    assert response.get_json() == {"error": error}


def test_send_message_between_clients_is_rejected(http, auth_headers, people):
    response = http.post(
        "/api/chat/messages",
        json={"recipientId": people.outsider.id, "text": "hi"},
        headers=auth_headers(people.client),
    )
    assert response.status_code == 400
    assert response.get_json() == {"error": "Chat is only available between clients and specialists"}


def test_room_messages_guarded_by_participation(http, auth_headers, people):
    add_message(people.r1, people.client, text="one")
    add_message(people.r1, people.specialist, text="two")

    response = http.get(f"/api/chat/rooms/{people.r1.id}/messages", headers=auth_headers(people.specialist))
    body = response.get_json()
    assert [m["text"] for m in body["messages"]] == ["one", "two"]
    assert body["room"]["id"] == people.r1.id
    assert body["room"]["clientId"] == people.client.client.id
    assert body["room"]["specialistId"] == people.specialist.specialist.id

    denied = http.get(f"/api/chat/rooms/{people.r1.id}/messages", headers=auth_headers(people.outsider))
    assert denied.status_code == 404


def test_mark_message_read_over_rest_notifies_sender(http, auth_headers, people, connect):
    message = add_message(people.r1, people.specialist)
    specialist = connect(people.specialist)
    specialist.get_received()

    response = http.put(f"/api/chat/messages/{message.id}/read", headers=auth_headers(people.client))

    assert response.status_code == 200
    assert response.get_json()["data"]["isRead"] is True
    [receipt] = payloads(specialist.get_received(), "chat:message:read")
    assert receipt["readBy"] == people.client.id


def test_mark_message_read_rules(http, auth_headers, people):
    message = add_message(people.r1, people.specialist)

    own = http.put(f"/api/chat/messages/{message.id}/read", headers=auth_headers(people.specialist))
    assert own.status_code == 400
    stranger = http.put(f"/api/chat/messages/{message.id}/read", headers=auth_headers(people.outsider))
    assert stranger.status_code == 403
    missing = http.put("/api/chat/messages/9999/read", headers=auth_headers(people.client))
    assert missing.status_code == 404


def test_notification_listing_and_counts(http, auth_headers, people):
    add_notifications(people.client, 2)
    add_notifications(people.client, 1, read=True)
    headers = auth_headers(people.client)

    assert len(http.get("/api/notifications", headers=headers).get_json()["notifications"]) == 3
    unread = http.get("/api/notifications?unreadOnly=true", headers=headers).get_json()["notifications"]
    assert len(unread) == 2
    assert http.get("/api/notifications/unread-count", headers=headers).get_json() == {"count": 2}

    response = http.put("/api/notifications/read-all", headers=headers)
    assert response.get_json()["data"] == {"count": 2}
    assert http.get("/api/notifications/unread-count", headers=headers).get_json() == {"count": 0}


def test_mark_notification_read_pushes_update(http, auth_headers, people, connect):
    [notification] = add_notifications(people.client, 1)
    sock = connect(people.client)
    sock.get_received()

    response = http.put(f"/api/notifications/{notification.id}/read", headers=auth_headers(people.client))

    assert response.status_code == 200
    [update] = payloads(sock.get_received(), "notification:updated")
    assert update["id"] == notification.id
    assert update["isRead"] is True
    db.session.expire_all()
    assert db.session.get(Notification, notification.id).read_at is not None


def test_mark_foreign_notification_read_is_forbidden(http, auth_headers, people):
    [notification] = add_notifications(people.specialist, 1)
    response = http.put(f"/api/notifications/{notification.id}/read", headers=auth_headers(people.client))
    assert response.status_code == 403
