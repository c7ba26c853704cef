from __future__ import annotations


def user_channel(user_id: int) -> str:
    """Private per-user channel every connection joins on activation."""
    return f"user:{user_id}"


def notifications_channel(user_id: int) -> str:
    return f"notifications:{user_id}"


def chat_channel(room_id: int) -> str:
    return f"chat:{room_id}"


def chat_presence_channel(room_id: int) -> str:
    # Kept apart from the chat channel so viewers never receive message traffic
    return f"presence:chat:{room_id}"
