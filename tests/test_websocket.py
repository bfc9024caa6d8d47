"""End-to-end tests of the /ws chat protocol."""
import itertools

_request_ids = itertools.count(1)


def request(ws, action, data=None):
    """Send one request and read frames until its ack; return (ack data, other frames)."""
    request_id = next(_request_ids)
    frame = {"action": action, "request_id": request_id}
    if data is not None:
        frame["data"] = data
    ws.send_json(frame)

    others = []
    while True:
        reply = ws.receive_json()
        if reply["event"] == "ack":
            assert reply["request_id"] == request_id
            assert reply["action"] == action
            return reply["data"], others
        others.append(reply)


def receive_event(ws, event):
    """Read frames until one with the given event name arrives."""
    while True:
        reply = ws.receive_json()
        if reply["event"] == event:
            return reply["data"]


def test_duplicate_login_any_case(client):
    with client.websocket_connect("/ws") as first, \
            client.websocket_connect("/ws") as second, \
            client.websocket_connect("/ws") as third:
        response, _ = request(first, "login", {"name": "alice"})
        assert response == {"success": True, "name": "alice", "rooms": ["general"]}

        response, _ = request(second, "login", {"name": "alice"})
        assert response["success"] is False
        assert response["code"] == "NameTaken"
        assert response["error"]

        response, _ = request(third, "login", {"name": "Alice"})
        assert response["code"] == "NameTaken"


def test_join_and_message_echoes_to_sender(client):
    with client.websocket_connect("/ws") as ws:
        request(ws, "login", {"name": "bob"})

        response, _ = request(ws, "joinRoom", {"room": "general"})
        assert response == {
            "success": True,
            "room": "general",
            "members": ["bob"],
            "rooms": ["general"],
        }

        response, frames = request(ws, "sendMessage", {"text": "hi"})
        assert response == {"success": True}
        [message] = [f["data"] for f in frames if f["event"] == "message"]
        assert message["sender"] == "bob"
        assert message["text"] == "hi"
        assert message["timestamp"]


def test_room_broadcast_and_member_left_on_disconnect(client):
    with client.websocket_connect("/ws") as a:
        request(a, "login", {"name": "a_user"})
        with client.websocket_connect("/ws") as b:
            request(b, "login", {"name": "b_user"})
            request(a, "joinRoom", {"room": "lobby"})
            response, _ = request(b, "joinRoom", {"room": "lobby"})
            assert response["members"] == ["a_user", "b_user"]
            assert receive_event(a, "memberJoined") == {"name": "b_user"}

            _, frames = request(a, "sendMessage", {"text": "hello"})
            assert [f["data"]["text"] for f in frames if f["event"] == "message"] == ["hello"]
            assert receive_event(b, "message")["text"] == "hello"

        assert receive_event(a, "memberLeft") == {"name": "b_user"}

        response, _ = request(a, "listRooms")
        assert response == {"rooms": ["general", "lobby"]}


def test_create_room_rules(client):
    with client.websocket_connect("/ws") as ws:
        response, _ = request(ws, "createRoom", {"room": "Team1"})
        assert response["code"] == "NotLoggedIn"

        request(ws, "login", {"name": "carol"})

        response, frames = request(ws, "createRoom", {"room": "Team1"})
        assert response == {"success": True, "room": "Team1", "rooms": ["general", "Team1"]}
        assert {"event": "roomsUpdated", "data": {"rooms": ["general", "Team1"]}} in frames

        response, _ = request(ws, "createRoom", {"room": "Team1"})
        assert response["code"] == "RoomExists"

        response, _ = request(ws, "createRoom", {"room": "a b"})
        assert response["code"] == "InvalidRoomName"


def test_request_failures_are_acked(client):
    with client.websocket_connect("/ws") as ws:
        response, _ = request(ws, "sendMessage", {"text": "hi"})
        assert response["code"] == "NotLoggedIn"

        response, _ = request(ws, "login", {"name": "x"})
        assert response["code"] == "InvalidName"

        request(ws, "login", {"name": "dave"})
        response, _ = request(ws, "sendMessage", {"text": "hi"})
        assert response["code"] == "NoRoom"

        response, _ = request(ws, "joinRoom", {"room": "y" * 31})
        assert response["code"] == "InvalidRoomName"

        request(ws, "joinRoom", {"room": "general"})
        response, frames = request(ws, "sendMessage", {"text": "   "})
        assert response["code"] == "EmptyMessage"
        assert frames == []


def test_malformed_payloads_become_validation_errors(client):
    with client.websocket_connect("/ws") as ws:
        response, _ = request(ws, "login", {"name": 123})
        assert response["code"] == "InvalidName"

        ws.send_json({"action": "login", "data": "not-an-object"})
        reply = ws.receive_json()
        assert reply["event"] == "ack"
        assert reply["request_id"] is None
        assert reply["data"]["code"] == "InvalidName"


def test_protocol_errors_keep_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("{not json")
        assert ws.receive_json() == {"event": "error", "data": {"message": "Invalid JSON"}}

        ws.send_json(["login"])
        assert ws.receive_json() == {"event": "error", "data": {"message": "Invalid frame"}}

        ws.send_json({"action": "shout"})
        assert ws.receive_json() == {"event": "error", "data": {"message": "Unknown action: shout"}}

        response, _ = request(ws, "listRooms")
        assert response == {"rooms": ["general"]}


def test_disconnect_frees_name(client):
    with client.websocket_connect("/ws") as ws:
        request(ws, "login", {"name": "erin"})

    with client.websocket_connect("/ws") as ws:
        response, _ = request(ws, "login", {"name": "ERIN"})
        assert response["success"] is True
