from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .handler import WebSubHandler

API_BASE_URL = "https://api.twitch.tv/helix"

USER_FOLLOWS_EVENT = "user_follows"
STREAM_UP_DOWN_EVENT = "stream_up_down"


def user_follows_topic(from_id: Optional[str] = None, to_id: Optional[str] = None) -> str:
    """Topic mirroring the Get Users Follows endpoint; from_id wins if both are given"""
    topic = f"{API_BASE_URL}/users/follows?first=1"
    if from_id:
        topic += f"&from_id={from_id}"
    elif to_id:
        topic += f"&to_id={to_id}"
    return topic


def stream_up_down_topic(user_id: str) -> str:
    return f"{API_BASE_URL}/streams?user_id={user_id}"


async def subscribe_user_follows(handler: "WebSubHandler", from_id: Optional[str] = None, to_id: Optional[str] = None) -> str:
    """
    Notify when a user starts following someone (from_id) or gets a new
    follower (to_id). Fires user_follows with the follow data and the id.
    """
    return await handler.subscribe(user_follows_topic(from_id, to_id), USER_FOLLOWS_EVENT)


async def subscribe_stream_up_down(handler: "WebSubHandler", user_id: str) -> str:
    """Notify when the stream of user_id goes online or offline; fires stream_up_down"""
    return await handler.subscribe(stream_up_down_topic(user_id), STREAM_UP_DOWN_EVENT)
