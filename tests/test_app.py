from datetime import datetime

import pytest

from roomchat.client.errors import NotAuthenticated, NotFound, ValidationFailure
from roomchat.client.store import ReceiveMention, ReceiveMessage
from roomchat.shared.utils import error_messages, mentioned_usernames


def test_rooms_list_is_public_and_includes_owners(started):
    rooms = started.fetch_rooms()

    assert sorted(room["name"] for room in rooms) == ["Garfield's First Room", "Sennacy's First Room"]
    users = started.store.state.users
    assert {users[room["owner_id"]]["username"] for room in rooms} == {"garfield", "sennacy"}


def test_fetch_room_merges_messages_room_and_authors(garfield):
    room = garfield.fetch_room(1)

    assert room["name"] == "Garfield's First Room"
    messages = garfield.room_messages(1)
    assert [m["body"] for m in messages] == ["hello", "hello"]
    assert [m["author"] for m in messages] == ["garfield", "sennacy"]


def test_fetch_room_keeps_fields_from_an_earlier_list(garfield):
    garfield.fetch_rooms()
    before = dict(garfield.store.state.rooms[1])
    garfield.fetch_room(1)
    assert garfield.store.state.rooms[1] == before


def test_missing_room_is_not_found_and_keeps_the_session(garfield):
    with pytest.raises(NotFound):
        garfield.fetch_room(999)
    assert garfield.current_user["username"] == "garfield"


def test_room_actions_require_a_user(started):
    with pytest.raises(NotAuthenticated):
        started.create_room("den")
    with pytest.raises(NotAuthenticated):
        started.fetch_mentions()


def test_create_and_destroy_room(garfield):
    room = garfield.create_room("Lasagna Lounge")
    assert room["owner_id"] == garfield.current_user["id"]
    assert garfield.store.state.rooms[room["id"]]["name"] == "Lasagna Lounge"

    garfield.destroy_room(room["id"])
    assert room["id"] not in garfield.store.state.rooms
    assert room["id"] not in {r["id"] for r in garfield.fetch_rooms()}


def test_blank_room_name_is_rejected(garfield):
    with pytest.raises(ValidationFailure) as excinfo:
        garfield.create_room("   ")
    assert excinfo.value.messages == ["Name can't be blank"]


def test_create_and_destroy_message(garfield):
    message = garfield.create_message(1, "monday again")
    assert message["author_id"] == garfield.current_user["id"]
    assert message["created_at"] is not None

    garfield.destroy_message(message["id"])
    assert message["id"] not in garfield.store.state.messages
    with pytest.raises(NotFound):
        garfield.destroy_message(message["id"])


def _mention_sennacy(controller, room_id=1, body="@sennacy where is my lasagna"):
    controller.create_message(room_id, body)
    controller.logout()
    controller.login("sennacy", "123456")


def test_mentions_flow_from_post_to_read(garfield):
    _mention_sennacy(garfield)

    feed = garfield.fetch_mentions()
    assert feed.num_unread == 1
    [mention] = feed.mentions
    assert mention.message["author"] == "garfield"
    assert mention.message["body"] == "@sennacy where is my lasagna"

    garfield.read_mention(mention.id)
    feed = garfield.mentions()
    assert feed.num_unread == 0
    assert feed.mentions[0].read is True

    garfield.read_mention(mention.id)
    assert garfield.fetch_mentions().num_unread == 0


def test_mention_ordering_after_refetch(garfield):
    _mention_sennacy(garfield, body="@sennacy first")
    garfield.logout()
    garfield.login("garfield", "123456")
    _mention_sennacy(garfield, body="@sennacy second")

    feed = garfield.fetch_mentions()
    assert [m.message["body"] for m in feed.mentions] == ["@sennacy second", "@sennacy first"]

    garfield.read_mention(feed.mentions[0].id)
    feed = garfield.mentions()
    assert [m.message["body"] for m in feed.mentions] == ["@sennacy first", "@sennacy second"]
    assert feed.num_unread == 1


def test_deleting_room_hides_its_mentions(garfield):
    _mention_sennacy(garfield)
    feed = garfield.fetch_mentions()
    assert len(feed.mentions) == 1
    mention_id = feed.mentions[0].id

    garfield.destroy_room(1)

    assert 1 not in garfield.store.state.rooms
    assert mention_id in garfield.store.state.mentions
    assert garfield.mentions().mentions == []
    assert garfield.fetch_mentions().mentions == []


def test_reading_someone_elses_mention_is_not_found(garfield):
    _mention_sennacy(garfield)
    mention_id = garfield.fetch_mentions().mentions[0].id
    garfield.logout()
    garfield.login("garfield", "123456")

    with pytest.raises(NotFound):
        garfield.read_mention(mention_id)


def test_failed_read_leaves_mention_unread(garfield):
    user_id = garfield.current_user["id"]
    garfield.store.dispatch(
        ReceiveMessage({"id": 777, "room_id": 1, "author_id": user_id, "body": "@garfield",
                        "created_at": datetime(2022, 10, 27, 12, 0)}),
        ReceiveMention({"id": 777, "user_id": user_id, "message_id": 777, "read": False}),
    )
    assert garfield.mentions().num_unread == 1

    with pytest.raises(NotFound):
        garfield.read_mention(777)

    assert garfield.store.state.mentions[777]["read"] is False
    assert garfield.mentions().num_unread == 1


def test_mentioned_usernames_are_distinct_and_ordered():
    assert mentioned_usernames("@b hi @a and @b again, mail a@x") == ["b", "a", "x"]


def test_error_messages_accepts_common_shapes():
    assert error_messages(["a", "b"]) == ["a", "b"]
    assert error_messages({"errors": ["a"]}) == ["a"]
    assert error_messages({"detail": "nope"}) == ["nope"]
    assert error_messages({"detail": [{"loc": ["body"], "msg": "field required"}]}) == ["field required"]
    assert error_messages(None, ["fallback"]) == ["fallback"]
