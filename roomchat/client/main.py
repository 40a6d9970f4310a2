"""Console client for the room chat application."""
import sys
from typing import Optional

from .app import ChatController
from .config import SERVER_URL
from .errors import APIError, NotAuthenticated


class ConsoleClient:
    """Interactive console front end over a ``ChatController``."""

    def __init__(self, server_url: str):
        self.controller = ChatController(server_url)
        self.open_room_id: Optional[int] = None

    def render(self) -> None:
        user = self.controller.current_user
        if user:
            print(f"Signed in as {user['username']}")
        else:
            print("Not signed in.")

    def _report(self, action: str, exc: Exception) -> None:
        messages = exc.messages if isinstance(exc, APIError) else [str(exc)]
        print(f"{action} failed:")
        for message in messages:
            print(f"  - {message}")

    def authenticate(self, signup: bool = False) -> None:
        print("=== Sign up ===" if signup else "=== Login ===")
        username = input("Username: ").strip()
        password = input("Password: ").strip()
        try:
            if signup:
                user = self.controller.signup(username, password)
            else:
                user = self.controller.login(username, password)
        except APIError as exc:
            self._report("Sign up" if signup else "Login", exc)
            return
        print(f"Welcome, {user['username']}!")

    def list_rooms(self) -> None:
        try:
            rooms = self.controller.fetch_rooms()
        except APIError as exc:
            self._report("Fetching rooms", exc)
            return
        users = self.controller.store.state.users
        for room in rooms:
            owner = users.get(room.get("owner_id"), {}).get("username", "?")
            print(f"- {room['id']}: {room['name']} (owner {owner})")
        if not rooms:
            print("No rooms yet.")

    def open_room(self) -> None:
        raw = input("Room id: ").strip()
        if not raw.isdigit():
            print("Room id must be a number.")
            return
        try:
            room = self.controller.fetch_room(int(raw))
        except (APIError, NotAuthenticated) as exc:
            self._report("Opening room", exc)
            return
        self.open_room_id = room["id"]
        print(f"=== {room['name']} ===")
        for message in self.controller.room_messages(room["id"]):
            timestamp = message["created_at"].strftime("%H:%M") if message.get("created_at") else "--:--"
            print(f"[{timestamp}] #{message['id']} {message['author'] or '?'}: {message['body']}")

    def post_message(self) -> None:
        if self.open_room_id is None:
            print("Open a room first.")
            return
        body = input("Message: ")
        try:
            self.controller.create_message(self.open_room_id, body)
        except (APIError, NotAuthenticated) as exc:
            self._report("Sending message", exc)
            return
        print("Message sent.")

    def create_room(self) -> None:
        name = input("Room name: ").strip()
        try:
            room = self.controller.create_room(name)
        except (APIError, NotAuthenticated) as exc:
            self._report("Creating room", exc)
            return
        print(f"Created room {room['id']}: {room['name']}")

    def delete_room(self) -> None:
        raw = input("Room id: ").strip()
        if not raw.isdigit():
            print("Room id must be a number.")
            return
        try:
            self.controller.destroy_room(int(raw))
        except (APIError, NotAuthenticated) as exc:
            self._report("Deleting room", exc)
            return
        if self.open_room_id == int(raw):
            self.open_room_id = None
        print("Room deleted.")

    def show_mentions(self) -> None:
        try:
            feed = self.controller.fetch_mentions()
        except (APIError, NotAuthenticated) as exc:
            self._report("Fetching mentions", exc)
            return
        print(f"=== Mentions ({feed.num_unread} unread) ===")
        if not feed.mentions:
            print("No unread mentions")
        for mention in feed.mentions:
            marker = " " if mention.read else "*"
            room_name = mention.room.get("name", "(deleted room)")
            print(f"{marker} {mention.id}: [{room_name}] {mention.message['author'] or '?'}: {mention.message['body']}")

    def read_mention(self) -> None:
        raw = input("Mention id: ").strip()
        if not raw.isdigit():
            print("Mention id must be a number.")
            return
        try:
            self.controller.read_mention(int(raw))
        except (APIError, NotAuthenticated) as exc:
            self._report("Marking mention read", exc)
            return
        print("Marked read.")

    def logout(self) -> None:
        try:
            self.controller.logout()
        except APIError as exc:
            self._report("Logout", exc)
            return
        self.open_room_id = None
        print("Logged out.")


def main():
    print("Room Chat Client")
    server_url = input(f"Server URL [{SERVER_URL}]: ").strip() or SERVER_URL
    client = ConsoleClient(server_url)
    try:
        client.controller.start(client.render)
    except APIError as exc:
        client._report("Restoring session", exc)

    while True:
        if client.controller.current_user is None:
            print("\nMenu: [r]ooms, [l]ogin, [s]ignup, [q]uit")
            choice = input("> ").strip().lower()
            if choice == "q":
                sys.exit(0)
            if choice == "r":
                client.list_rooms()
            if choice == "l":
                client.authenticate()
            if choice == "s":
                client.authenticate(signup=True)
            continue

        print("\nUser menu: [r]ooms, [o]pen room, [p]ost, [c]reate room, [d]elete room, "
              "[m]entions, mark [read], [x] logout, [q]uit")
        sub = input("> ").strip().lower()
        if sub == "q":
            sys.exit(0)
        if sub == "r":
            client.list_rooms()
        if sub == "o":
            client.open_room()
        if sub == "p":
            client.post_message()
        if sub == "c":
            client.create_room()
        if sub == "d":
            client.delete_room()
        if sub == "m":
            client.show_mentions()
        if sub == "read":
            client.read_mention()
        if sub == "x":
            client.logout()


if __name__ == "__main__":
    main()
