from __future__ import annotations

import pytest

from hearty.errors import AuthorizationFailure
from hearty.realtime.guard import RoomAccessGuard

from conftest import add_message


@pytest.fixture
def guard():
    return RoomAccessGuard()


def test_both_participants_may_join(guard, people):
    assert guard.can_join_chat_room(people.client.id, people.r1.id)
    assert guard.can_join_chat_room(people.specialist.id, people.r1.id)


def test_non_participant_is_denied(guard, people):
    assert not guard.can_join_chat_room(people.outsider.id, people.r1.id)
    assert not guard.can_join_chat_room(people.specialist.id, people.r2.id)


def test_missing_room_is_denied(guard, people):
    assert not guard.can_join_chat_room(people.client.id, 9999)
    with pytest.raises(AuthorizationFailure) as exc:
        guard.require_chat_room(people.client.id, 9999)
    assert exc.value.message == "Chat room not found or access denied"


def test_notification_channel_is_owner_only(guard, people):
    assert guard.can_join_notification_channel(people.client.id, people.client.id)
    assert not guard.can_join_notification_channel(people.client.id, people.specialist.id)


def test_message_lookup_checks_room_and_participation(guard, people):
    message = add_message(people.r1, people.specialist)

    assert guard.find_accessible_message(people.client.id, message.id, people.r1.id) is message
    assert guard.find_accessible_message(people.client.id, message.id, people.r2.id) is None
    assert guard.find_accessible_message(people.outsider.id, message.id, people.r1.id) is None


def test_room_helpers(people):
    room = people.r1
    assert room.participant_name(people.client.id) == "Anna Petrova"
    assert room.participant_name(people.outsider.id) is None
