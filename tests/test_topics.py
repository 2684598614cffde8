"""
Twitch topic builder tests.
"""

import inspect

import pytest

from hubrelay.topics import (
    stream_up_down_topic,
    subscribe_stream_up_down,
    subscribe_user_follows,
    user_follows_topic,
)


def test_user_follows_topic_from_id():
    assert user_follows_topic(from_id="1234") == (
        "https://api.twitch.tv/helix/users/follows?first=1&from_id=1234"
    )


def test_user_follows_topic_to_id():
    assert user_follows_topic(to_id="42") == (
        "https://api.twitch.tv/helix/users/follows?first=1&to_id=42"
    )


def test_user_follows_topic_prefers_from_id():
    assert user_follows_topic(from_id="1", to_id="2").endswith("&from_id=1")


def test_stream_up_down_topic():
    assert stream_up_down_topic("5678") == "https://api.twitch.tv/helix/streams?user_id=5678"


@pytest.mark.asyncio
async def test_subscribe_helpers_use_event_names(handler):
    follows_id = await subscribe_user_follows(handler, to_id="42")
    stream_id = await subscribe_stream_up_down(handler, "5678")

    assert handler.registry.get(follows_id).event_name == "user_follows"
    assert handler.registry.get(stream_id).event_name == "stream_up_down"
    assert handler.registry.get(stream_id).topic.endswith("user_id=5678")


@pytest.mark.parametrize("helper", [subscribe_user_follows, subscribe_stream_up_down])
def test_subscribe_helpers_take_a_handler(helper):
    annotation = inspect.signature(helper).parameters["handler"].annotation

    assert annotation == "WebSubHandler"
