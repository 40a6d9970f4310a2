from datetime import datetime, timedelta
from itertools import permutations

import pytest

from roomchat.client.mentions import get_mentions
from roomchat.client.store import (
    ReadMention,
    ReceiveCurrentUser,
    ReceiveMention,
    ReceiveMessage,
    ReceiveMessages,
    ReceiveRoom,
    ReceiveUser,
    RemoveRoom,
    Store,
)

T0 = datetime(2022, 10, 27, 12, 0, 0)


def _message(message_id, minutes, room_id=1, author_id=2):
    return {
        "id": message_id,
        "room_id": room_id,
        "author_id": author_id,
        "body": f"@garfield {message_id}",
        "created_at": T0 + timedelta(minutes=minutes),
    }


@pytest.fixture
def store():
    store = Store()
    store.dispatch(
        ReceiveCurrentUser({"id": 1, "username": "garfield"}),
        ReceiveUser({"id": 2, "username": "sennacy"}),
        ReceiveRoom({"id": 1, "name": "Garfield's First Room", "owner_id": 1}),
    )
    return store


def test_unread_first_then_newest_first(store):
    messages = {10: _message(10, 1), 20: _message(20, 2), 30: _message(30, 3)}
    mentions = [
        {"id": 1, "user_id": 1, "message_id": 10, "read": False},  # A
        {"id": 2, "user_id": 1, "message_id": 20, "read": True},  # B
        {"id": 3, "user_id": 1, "message_id": 30, "read": False},  # C
    ]
    store.dispatch(ReceiveMessages(messages))
    base = store.state
    for order in permutations(mentions):
        state = base
        for mention in order:
            state = Store(state).dispatch(ReceiveMention(mention))
        feed = get_mentions(state)
        assert [m.id for m in feed.mentions] == [3, 1, 2]
        assert feed.num_unread == 2


def test_equal_timestamps_fall_back_to_mention_id_descending(store):
    store.dispatch(
        ReceiveMessage(_message(10, 0)),
        ReceiveMessage(_message(11, 0)),
        ReceiveMention({"id": 4, "user_id": 1, "message_id": 10, "read": False}),
        ReceiveMention({"id": 9, "user_id": 1, "message_id": 11, "read": False}),
    )
    assert [m.id for m in get_mentions(store.state).mentions] == [9, 4]


def test_mention_without_message_appears_once_message_arrives(store):
    store.dispatch(ReceiveMention({"id": 1, "user_id": 1, "message_id": 10, "read": False}))
    feed = get_mentions(store.state)
    assert feed.mentions == []
    assert feed.num_unread == 0

    store.dispatch(ReceiveMessage(_message(10, 0)))
    feed = get_mentions(store.state)
    assert [m.id for m in feed.mentions] == [1]
    assert feed.num_unread == 1
    assert get_mentions(store.state) == feed


def test_other_users_mentions_are_left_out(store):
    store.dispatch(
        ReceiveMessage(_message(10, 0)),
        ReceiveMention({"id": 1, "user_id": 2, "message_id": 10, "read": False}),
    )
    assert get_mentions(store.state).mentions == []


def test_mentions_are_annotated_with_author_and_room(store):
    store.dispatch(
        ReceiveMessage(_message(10, 0)),
        ReceiveMessage(_message(11, 1, room_id=99, author_id=42)),
        ReceiveMention({"id": 1, "user_id": 1, "message_id": 10, "read": False}),
        ReceiveMention({"id": 2, "user_id": 1, "message_id": 11, "read": False}),
    )
    newest, oldest = get_mentions(store.state).mentions
    assert newest.message["author"] is None
    assert newest.room == {}
    assert oldest.message["author"] == "sennacy"
    assert oldest.room["name"] == "Garfield's First Room"


def test_unread_count_drops_by_one_per_read_until_zero(store):
    for n in range(3):
        store.dispatch(
            ReceiveMessage(_message(10 + n, n)),
            ReceiveMention({"id": n + 1, "user_id": 1, "message_id": 10 + n, "read": False}),
        )
    counts = [get_mentions(store.state).num_unread]
    for mention_id in (2, 1, 3):
        store.dispatch(ReadMention(mention_id))
        feed = get_mentions(store.state)
        assert feed.num_unread == sum(1 for m in feed.mentions if not m.read)
        counts.append(feed.num_unread)
    assert counts == [3, 2, 1, 0]


def test_deleting_a_room_hides_its_mentions_without_purging_them(store):
    store.dispatch(
        ReceiveMessage(_message(10, 0)),
        ReceiveMention({"id": 1, "user_id": 1, "message_id": 10, "read": False}),
    )
    assert len(get_mentions(store.state).mentions) == 1

    store.dispatch(RemoveRoom(1))
    assert 1 not in store.state.rooms
    assert 1 in store.state.mentions
    assert get_mentions(store.state).mentions == []


def test_signed_out_view_is_empty():
    store = Store()
    store.dispatch(
        ReceiveMessage(_message(10, 0)),
        ReceiveMention({"id": 1, "user_id": None, "message_id": 10, "read": False}),
    )
    assert get_mentions(store.state).mentions == []
