"""
Tests for document models, request schemas and small helpers.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from app.core.exceptions import ValidationError
from app.core.utils import generate_room_code, page_window, total_pages, format_datetime
from app.models.message import MessageModel, ReadReceipt
from app.models.room import RoomModel, RoomMember
from app.models.user import UserModel, SENDER_PROFILE_FIELDS
from app.schemas.message import MessageCreate, MessageType
from app.schemas.room import RoomCreate, RoomJoin, MemberRole


class TestRoomModel:

    def test_code_is_stored_uppercase(self):
        room = RoomModel(name="Team", code="abcd", creator=ObjectId())
        assert room.code == "ABCD"

    def test_to_dict_omits_missing_id(self):
        room = RoomModel(name="Team", code="ABCD", creator=ObjectId())
        assert "_id" not in room.to_dict()

    def test_membership_and_capacity(self):
        creator, other = ObjectId(), ObjectId()
        room = RoomModel(
            name="Duo",
            code="DUO1",
            creator=creator,
            max_members=2,
            members=[RoomMember(creator, MemberRole.ADMIN)],
        )
        assert room.is_member(str(creator))
        assert not room.is_member(other)
        assert not room.is_full()

        room.members.append(RoomMember(other))
        assert room.is_full()

    def test_round_trip_keeps_roles(self):
        creator = ObjectId()
        room = RoomModel(
            name="Team",
            code="ABCD",
            creator=creator,
            members=[RoomMember(creator, MemberRole.ADMIN)],
            _id=ObjectId(),
        )
        restored = RoomModel.from_dict(room.to_dict())
        assert restored.get_member(creator).is_admin()
        assert restored.max_members == 50
        assert restored.is_private is False

    def test_response_uses_resolved_profiles(self):
        creator = ObjectId()
        room = RoomModel(
            name="Team",
            code="ABCD",
            creator=creator,
            members=[RoomMember(creator, MemberRole.ADMIN)],
            _id=ObjectId(),
        )
        profile = {"_id": str(creator), "username": "alice"}
        body = room.to_response_dict({str(creator): profile})

        assert body["creator"] == profile
        assert body["members"][0]["user"] == profile
        assert body["members"][0]["role"] == "admin"
        assert body["maxMembers"] == 50
        assert body["isPrivate"] is False


class TestMessageModel:

    def test_read_receipts(self):
        reader = ObjectId()
        message = MessageModel(content="hi", sender=ObjectId(), room=ObjectId())
        assert not message.has_been_read_by(reader)

        message.read_by.append(ReadReceipt(reader))
        assert message.has_been_read_by(str(reader))

    def test_sender_check_accepts_strings(self):
        sender = ObjectId()
        message = MessageModel(content="hi", sender=str(sender), room=ObjectId())
        assert message.is_sent_by(str(sender))
        assert not message.is_sent_by(str(ObjectId()))

    def test_reply_left_as_id_when_not_resolved(self):
        reply_id = ObjectId()
        message = MessageModel(content="hi", sender=ObjectId(), room=ObjectId(), reply_to=reply_id, _id=ObjectId())

        assert message.to_response_dict()["replyTo"] == str(reply_id)
        assert message.to_response_dict({}, {})["replyTo"] is None

    def test_defaults(self):
        message = MessageModel(content="hi", sender=ObjectId(), room=ObjectId(), _id=ObjectId())
        body = message.to_response_dict()
        assert body["type"] == "text"
        assert body["edited"] is False
        assert body["editedAt"] is None
        assert body["readBy"] == []


class TestUserModel:

    def test_sender_summary_fields(self):
        user = UserModel.from_dict({"_id": ObjectId(), "username": "alice", "email": "a@example.com"})
        summary = user.to_summary(SENDER_PROFILE_FIELDS)
        assert set(summary) == {"_id", "username", "avatar"}

    def test_room_summary_renames_online_flag(self):
        user = UserModel.from_dict({"_id": ObjectId(), "username": "alice", "is_online": True})
        assert user.to_summary()["isOnline"] is True


class TestRoomSchemas:

    def test_code_is_optional_and_uppercased(self):
        assert RoomCreate.from_request({"name": "Team"}).code is None
        assert RoomCreate.from_request({"name": "Team", "code": "ab12"}).code == "AB12"

    def test_camel_case_fields(self):
        payload = RoomCreate.from_request({"name": " Team ", "maxMembers": 10, "isPrivate": True})
        assert payload.name == "Team"
        assert payload.max_members == 10
        assert payload.is_private is True

    @pytest.mark.parametrize("body", [
        {},
        {"name": ""},
        {"name": "x" * 51},
        {"name": "Team", "code": "abc"},
        {"name": "Team", "code": "abcdefghi"},
        {"name": "Team", "code": "ab-12"},
        {"name": "Team", "code": "ßßßß"},
        {"name": "Team", "code": "ßßßßßßßß"},
        {"name": "Team", "code": "été1"},
        {"name": "Team", "description": "d" * 201},
        {"name": "Team", "maxMembers": 1},
        {"name": "Team", "maxMembers": 101},
        {"name": "Team", "unknown": True},
    ])
    def test_invalid_bodies(self, body):
        with pytest.raises(ValidationError) as exc_info:
            RoomCreate.from_request(body)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Données invalides"
        assert "details" in exc_info.value.extra_data

    def test_non_object_body(self):
        with pytest.raises(ValidationError):
            RoomJoin.from_request(None)

    def test_join_code_uppercased(self):
        assert RoomJoin.from_request({"code": "team01"}).code == "TEAM01"

    @pytest.mark.parametrize("code", ["ßßßß", "ﬀﬀﬀﬀ", "ıiii"])
    def test_codes_limited_to_ascii_letters_and_digits(self, code):
        with pytest.raises(ValidationError):
            RoomJoin.from_request({"code": code})
        with pytest.raises(ValidationError):
            RoomCreate.from_request({"name": "Team", "code": code})


class TestMessageSchemas:

    def test_content_trimmed(self):
        payload = MessageCreate.from_request({"content": "  hi ", "roomId": str(ObjectId())})
        assert payload.content == "hi"
        assert payload.type is None
        assert payload.reply_to is None

    @pytest.mark.parametrize("body", [
        {"content": "", "roomId": str(ObjectId())},
        {"content": "   ", "roomId": str(ObjectId())},
        {"content": "x" * 1001, "roomId": str(ObjectId())},
        {"content": "hi"},
        {"content": "hi", "roomId": "not-an-id"},
        {"content": "hi", "roomId": str(ObjectId()), "type": "system"},
        {"content": "hi", "roomId": str(ObjectId()), "replyTo": "nope"},
    ])
    def test_invalid_bodies(self, body):
        with pytest.raises(ValidationError):
            MessageCreate.from_request(body)

    def test_message_types(self):
        assert {t.value for t in MessageType} == {"text", "image", "file", "system"}


class TestHelpers:

    def test_generated_codes(self):
        code = generate_room_code(6)
        assert len(code) == 6
        assert code == code.upper()
        assert code.isalnum()

    @pytest.mark.parametrize("page,limit,expected", [
        (None, None, (1, 50)),
        ("2", "10", (2, 10)),
        ("0", "-5", (1, 50)),
        ("abc", "xyz", (1, 50)),
        ("1", "500", (1, 500)),
    ])
    def test_page_window(self, page, limit, expected):
        assert page_window(page, limit, 50) == expected

    def test_total_pages(self):
        assert total_pages(5, 2) == 3
        assert total_pages(0, 50) == 0

    def test_naive_datetimes_formatted_as_utc(self):
        assert format_datetime(datetime(2024, 1, 1, 12, 0)) == "2024-01-01T12:00:00+00:00"
        assert format_datetime(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)) == "2024-01-01T12:00:00+00:00"
        assert format_datetime(None) is None
