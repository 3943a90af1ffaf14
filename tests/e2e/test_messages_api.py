"""End-to-end tests for direct message endpoints."""

import pytest
from fastapi.testclient import TestClient

from forum.interface.api.app import create_app
from tests.conftest import make_user
from tests.di import build_test_container
from tests.harness import auth_headers, seed


@pytest.fixture
def container():
    return build_test_container(with_fastapi=True)


@pytest.fixture
def client(container):
    """Create test client with test container."""
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def alice_and_bob(container):
    alice, bob = make_user("alice"), make_user("bob")
    seed(container, alice, bob)
    return alice, bob


def _send(client, sender, receiver, content="Hello"):
    return client.post(
        "/messages",
        json={"receiver_id": str(receiver.id), "content": content},
        headers=auth_headers(sender),
    )


class TestSendMessage:
    """POST /messages."""

    def test_send_message(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        response = _send(client, alice, bob, "  Hi Bob  ")

        assert response.status_code == 201
        data = response.json()
        assert data["sender_id"] == str(alice.id)
        assert data["receiver_id"] == str(bob.id)
        assert data["content"] == "Hi Bob"
        assert data["read"] is False
        assert data["sender"]["username"] == "alice"

    def test_recipient_gets_new_message_notification(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        _send(client, alice, bob)
        response = client.get("/notifications", headers=auth_headers(bob))

        assert [n["type"] for n in response.json()["notifications"]] == [
            "new_message"
        ]

    def test_requires_authentication(self, client, alice_and_bob):
        _, bob = alice_and_bob

        response = client.post(
            "/messages", json={"receiver_id": str(bob.id), "content": "Hi"}
        )

        assert response.status_code == 401

    def test_chat_disabled_is_403(self, client, container):
        alice, hermit = make_user(), make_user(chat=False)
        seed(container, alice, hermit)

        response = _send(client, alice, hermit)

        assert response.status_code == 403

    def test_unknown_recipient_is_404(self, client, alice_and_bob):
        alice, _ = alice_and_bob

        response = _send(client, alice, make_user())

        assert response.status_code == 404

    def test_message_to_self_is_stored_without_notification(
        self, client, alice_and_bob
    ):
        alice, _ = alice_and_bob

        response = _send(client, alice, alice, "note to self")
        conversation = client.get(f"/messages/{alice.id}", headers=auth_headers(alice))
        notifications = client.get("/notifications", headers=auth_headers(alice))

        assert response.status_code == 201
        assert [m["id"] for m in conversation.json()["messages"]] == [
            response.json()["id"]
        ]
        assert notifications.json()["notifications"] == []

    def test_blank_content_is_400(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        response = _send(client, alice, bob, "   ")

        assert response.status_code == 400


class TestConversation:
    """Reading, acknowledging and hiding messages."""

    def test_reading_conversation_marks_incoming_read(self, client, alice_and_bob):
        alice, bob = alice_and_bob
        _send(client, alice, bob, "one")
        _send(client, alice, bob, "two")

        before = client.get("/messages/unread/count", headers=auth_headers(bob))
        conversation = client.get(f"/messages/{alice.id}", headers=auth_headers(bob))
        after = client.get("/messages/unread/count", headers=auth_headers(bob))

        assert before.json() == {"count": 2}
        assert conversation.status_code == 200
        body = conversation.json()
        assert [m["content"] for m in body["messages"]] == ["one", "two"]
        assert body["total"] == 2
        assert body["has_more"] is False
        assert after.json() == {"count": 0}

    def test_conversation_pagination(self, client, alice_and_bob):
        alice, bob = alice_and_bob
        for i in range(3):
            _send(client, alice, bob, f"message {i}")

        response = client.get(
            f"/messages/{bob.id}", params={"limit": 2}, headers=auth_headers(alice)
        )

        body = response.json()
        assert len(body["messages"]) == 2
        assert body["limit"] == 2
        assert body["has_more"] is True

    def test_mark_read(self, client, alice_and_bob):
        alice, bob = alice_and_bob
        message_id = _send(client, alice, bob).json()["id"]

        response = client.put(
            f"/messages/{message_id}/read", headers=auth_headers(bob)
        )

        assert response.status_code == 200
        assert response.json()["read"] is True
        assert response.json()["read_at"] is not None

    def test_sender_cannot_mark_read(self, client, alice_and_bob):
        alice, bob = alice_and_bob
        message_id = _send(client, alice, bob).json()["id"]

        response = client.put(
            f"/messages/{message_id}/read", headers=auth_headers(alice)
        )

        assert response.status_code == 404

    def test_delete_hides_only_for_caller(self, client, alice_and_bob):
        alice, bob = alice_and_bob
        message_id = _send(client, alice, bob).json()["id"]

        deleted = client.delete(f"/messages/{message_id}", headers=auth_headers(alice))
        alice_view = client.get(f"/messages/{bob.id}", headers=auth_headers(alice))
        bob_view = client.get(f"/messages/{alice.id}", headers=auth_headers(bob))

        assert deleted.status_code == 200
        assert deleted.json() == {"message_id": message_id, "deleted": True}
        assert alice_view.json()["messages"] == []
        assert [m["id"] for m in bob_view.json()["messages"]] == [message_id]

    def test_outsider_cannot_delete(self, client, container, alice_and_bob):
        alice, bob = alice_and_bob
        eve = make_user()
        seed(container, eve)
        message_id = _send(client, alice, bob).json()["id"]

        response = client.delete(f"/messages/{message_id}", headers=auth_headers(eve))

        assert response.status_code == 403

    def test_list_conversations(self, client, container, alice_and_bob):
        alice, bob = alice_and_bob
        carol = make_user("carol")
        seed(container, carol)
        _send(client, bob, alice, "from bob")
        _send(client, carol, alice, "from carol")

        response = client.get("/messages/conversations", headers=auth_headers(alice))

        assert response.status_code == 200
        conversations = response.json()["conversations"]
        assert [c["user"]["username"] for c in conversations] == ["carol", "bob"]
        assert conversations[0]["last_message"]["content"] == "from carol"
        assert conversations[0]["unread_count"] == 1
