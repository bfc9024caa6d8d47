"""Tests for the in-memory room directory."""
from roomchat.services.room_manager import RoomManager


def test_directory_is_seeded_with_default_room():
    assert RoomManager().list_rooms() == ["general"]
    assert RoomManager(default_room="lobby").list_rooms() == ["lobby"]
    assert RoomManager(default_room=None).list_rooms() == []


def test_add_room_keeps_insertion_order_and_reports_duplicates(room_manager):
    assert room_manager.add_room("zeta") is True
    assert room_manager.add_room("alpha") is True
    assert room_manager.add_room("zeta") is False
    assert room_manager.list_rooms() == ["general", "zeta", "alpha"]


def test_add_member_registers_unknown_room(room_manager):
    room_manager.add_member("lobby", "alice")
    room_manager.add_member("lobby", "bob")

    assert room_manager.has_room("lobby")
    assert room_manager.list_members("lobby") == ["alice", "bob"]


def test_last_member_leaving_drops_membership_but_keeps_room(room_manager):
    room_manager.add_member("lobby", "alice")

    assert room_manager.remove_member("lobby", "alice") is True
    assert room_manager.remove_member("lobby", "alice") is False
    assert room_manager.active_rooms() == []
    assert room_manager.list_members("lobby") == []
    assert "lobby" in room_manager.list_rooms()
