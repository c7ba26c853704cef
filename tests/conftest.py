from __future__ import annotations

from types import SimpleNamespace

import pytest

from hearty import create_app
from hearty.config import TestConfig
from hearty.extensions import db
from hearty.models import ChatRoom, Client, Message, Notification, Specialist, User
from hearty.security import issue_token


@pytest.fixture
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def realtime(app):
    return app.extensions["realtime"]


def _user(email, first, last, role):
    user = User(email=email, first_name=first, last_name=last, role=role)
    db.session.add(user)
    db.session.flush()
    if role == "CLIENT":
        db.session.add(Client(user=user))
    elif role == "SPECIALIST":
        db.session.add(Specialist(user=user, name=f"Dr. {last}", specialty="Psychology"))
    db.session.flush()
    return user


@pytest.fixture
def people(app):
    """Two chat rooms: R1 = (client, specialist), R2 = (outsider, other_specialist)."""
    client = _user("anna@example.com", "Anna", "Petrova", "CLIENT")
    specialist = _user("ivan@example.com", "Ivan", "Sokolov", "SPECIALIST")
    outsider = _user("oleg@example.com", "Oleg", "Smirnov", "CLIENT")
    other_specialist = _user("maria@example.com", "Maria", "Volkova", "SPECIALIST")

    r1 = ChatRoom(client_id=client.client.id, specialist_id=specialist.specialist.id)
    r2 = ChatRoom(client_id=outsider.client.id, specialist_id=other_specialist.specialist.id)
    db.session.add_all([r1, r2])
    db.session.commit()
    return SimpleNamespace(
        client=client,
        specialist=specialist,
        outsider=outsider,
        other_specialist=other_specialist,
        r1=r1,
        r2=r2,
    )


@pytest.fixture
def token_for(app):
    def _token_for(user, expires_in=None):
        return issue_token(user, expires_in=expires_in)

    return _token_for


@pytest.fixture
def connect(app, realtime, token_for):
    """Open a socket test client for ``user``; the credential goes where ``via`` says."""
    opened = []

    def _connect(user=None, via="auth", token=None):
        if token is None and user is not None:
            token = token_for(user)
        kwargs = {}
        if token is not None:
            if via == "auth":
                kwargs["auth"] = {"token": token}
            elif via == "query":
                kwargs["query_string"] = f"token={token}"
            elif via == "header":
                kwargs["headers"] = {"Authorization": f"Bearer {token}"}
        sock = realtime.socketio.test_client(app, **kwargs)
        opened.append(sock)
        return sock

    yield _connect
    for sock in opened:
        if sock.is_connected():
            sock.disconnect()


@pytest.fixture
def auth_headers(token_for):
    def _headers(user):
        return {"Authorization": f"Bearer {token_for(user)}"}

    return _headers


def payloads(received, name):
    return [event["args"][0] if event["args"] else None for event in received if event["name"] == name]


def add_message(room, sender, text="hello"):
    message = Message(chat_room_id=room.id, sender_id=sender.id, sender_role=sender.role, text=text)
    db.session.add(message)
    db.session.commit()
    return message


def add_notifications(user, count, read=False):
    from hearty.lib.utils import utcnow

    rows = [
        Notification(
            user_id=user.id,
            type="IN_APP",
            subject=f"Subject {i}",
            message=f"Body {i}",
            status="SENT",
            read_at=utcnow() if read else None,
        )
        for i in range(count)
    ]
    db.session.add_all(rows)
    db.session.commit()
    return rows
