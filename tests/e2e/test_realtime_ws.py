"""End-to-end tests for the realtime WebSocket endpoint."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from forum.adapter.realtime import RealtimeEvent, RealtimeHub
from forum.interface.api.app import create_app
from tests.conftest import make_user
from tests.di import build_test_container
from tests.harness import auth_headers, auth_token, seed


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


def _connect(client, user):
    return client.websocket_connect(f"/ws?token={auth_token(user)}")


class TestRealtimeConnection:
    """Handshake and frame validation."""

    def test_connected_ack(self, client, alice_and_bob):
        alice, _ = alice_and_bob

        with _connect(client, alice) as ws:
            ack = ws.receive_json()

        assert ack == {"type": "connected", "data": {"user_id": str(alice.id)}}

    def test_cookie_authentication(self, client, alice_and_bob):
        alice, _ = alice_and_bob

        with client.websocket_connect("/ws", headers=auth_headers(alice)) as ws:
            assert ws.receive_json()["type"] == "connected"

    def test_rejects_missing_token(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws"):
                pass

        assert exc_info.value.code == 1008

    def test_rejects_bad_token(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws?token=garbage"):
                pass

        assert exc_info.value.code == 1008

    def test_invalid_frame_gets_error(self, client, alice_and_bob):
        alice, _ = alice_and_bob

        with _connect(client, alice) as ws:
            ws.receive_json()
            ws.send_text('{"type": "dance"}')
            error = ws.receive_json()
            ws.send_text("not json")
            second = ws.receive_json()

        assert error["type"] == "error"
        assert error["data"]["code"] == 400
        assert second["data"]["code"] == 400

    def test_join_room_requires_room_id(self, client, alice_and_bob):
        alice, _ = alice_and_bob

        with _connect(client, alice) as ws:
            ws.receive_json()
            ws.send_json({"type": "join-room", "data": {}})
            error = ws.receive_json()

        assert error == {
            "type": "error",
            "data": {"message": "room_id is required", "code": 400},
        }


class TestRealtimeDelivery:
    """Events pushed to connected users."""

    def test_rest_message_is_pushed_to_recipient(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        with _connect(client, bob) as ws:
            ws.receive_json()
            response = client.post(
                "/messages",
                json={"receiver_id": str(bob.id), "content": "Hi Bob"},
                headers=auth_headers(alice),
            )
            new_message = ws.receive_json()
            new_notification = ws.receive_json()

        assert response.status_code == 201
        assert new_message == {"type": "new-message", "data": response.json()}
        assert new_notification["type"] == "new-notification"
        assert new_notification["data"]["type"] == "new_message"
        assert new_notification["data"]["message_id"] == response.json()["id"]

    def test_send_message_frame(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        with _connect(client, bob) as bob_ws, _connect(client, alice) as alice_ws:
            bob_ws.receive_json()
            alice_ws.receive_json()

            alice_ws.send_json(
                {
                    "type": "send-message",
                    "data": {"receiver_id": str(bob.id), "content": "over the wire"},
                }
            )
            ack = alice_ws.receive_json()
            pushed = bob_ws.receive_json()

        assert ack["type"] == "message-sent"
        assert ack["data"]["content"] == "over the wire"
        assert pushed == {"type": "new-message", "data": ack["data"]}

        # Persisted like a REST message
        conversation = client.get(f"/messages/{alice.id}", headers=auth_headers(bob))
        assert [m["id"] for m in conversation.json()["messages"]] == [ack["data"]["id"]]

    def test_send_message_frame_to_chat_disabled_user(self, client, container):
        alice, hermit = make_user(), make_user(chat=False)
        seed(container, alice, hermit)

        with _connect(client, alice) as ws:
            ws.receive_json()
            ws.send_json(
                {
                    "type": "send-message",
                    "data": {"receiver_id": str(hermit.id), "content": "Hello?"},
                }
            )
            error = ws.receive_json()

        assert error["type"] == "error"
        assert error["data"]["code"] == 403

    def test_every_tab_receives_push(self, client, alice_and_bob):
        alice, bob = alice_and_bob

        with _connect(client, bob) as tab_one, _connect(client, bob) as tab_two:
            tab_one.receive_json()
            tab_two.receive_json()
            client.post(
                "/messages",
                json={"receiver_id": str(bob.id), "content": "both tabs"},
                headers=auth_headers(alice),
            )

            assert tab_one.receive_json()["type"] == "new-message"
            assert tab_two.receive_json()["type"] == "new-message"

    def test_room_broadcast_reaches_joined_sockets_only(
        self, client, container, alice_and_bob
    ):
        alice, bob = alice_and_bob
        hub = client.portal.call(container.get, RealtimeHub)

        with _connect(client, alice) as member, _connect(client, bob) as outsider:
            member.receive_json()
            outsider.receive_json()
            member.send_json({"type": "join-room", "data": {"room_id": "thread:1"}})
            # The reply to the next frame proves the join was handled
            member.send_text("{}")
            assert member.receive_json()["type"] == "error"

            delivered = client.portal.call(
                hub.broadcast,
                "thread:1",
                RealtimeEvent(type="new-comment", data={"comment_id": "c1"}),
            )
            frame = member.receive_json()

        assert delivered == 1
        assert frame == {"type": "new-comment", "data": {"comment_id": "c1"}}
