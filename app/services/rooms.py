"""
Room service: creation, code-based join, membership listing and leave.

Every function takes the database handle and the caller's user id
explicitly and returns response-ready dictionaries.
"""

import logging
from itertools import chain
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..core.config import settings
from ..core.exceptions import ResourceNotFoundError, AuthorizationError, ConflictError
from ..core.utils import generate_room_code, get_current_timestamp, is_valid_object_id, to_object_id
from ..core.validators import normalize_room_code
from ..models.room import RoomModel, RoomMember
from ..schemas.room import MemberRole
from . import users

logger = logging.getLogger(__name__)

ROOM_NOT_FOUND = "Salle non trouvée"
USER_NOT_FOUND = "Utilisateur non trouvé"
ACCESS_DENIED = "Accès refusé"
CODE_TAKEN = "Ce code de salle existe déjà"
ALREADY_MEMBER = "Vous êtes déjà membre de cette salle"
ROOM_FULL = "La salle est pleine"

def load_room(db: Database, room_id: str) -> RoomModel:
    """Fetch a room by id; malformed ids are reported as not found"""
    if not is_valid_object_id(room_id):
        raise ResourceNotFoundError(ROOM_NOT_FOUND)
    room_data = db.rooms.find_one({"_id": to_object_id(room_id)})
    if room_data is None:
        raise ResourceNotFoundError(ROOM_NOT_FOUND)
    return RoomModel.from_dict(room_data)

def require_member(room: RoomModel, caller_id: str) -> None:
    if not room.is_member(caller_id):
        raise AuthorizationError(ACCESS_DENIED)

def serialize_rooms(db: Database, rooms: List[RoomModel]) -> List[dict]:
    """Resolve creators and members of several rooms with one user lookup"""
    profiles = users.resolve_profiles(db, chain.from_iterable(room.user_ids() for room in rooms))
    return [room.to_response_dict(profiles) for room in rooms]

def serialize_room(db: Database, room: RoomModel) -> dict:
    return serialize_rooms(db, [room])[0]

def _generate_unique_code(db: Database) -> str:
    code = generate_room_code(settings.ROOM_CODE_LENGTH)
    while db.rooms.find_one({"code": code}, {"_id": 1}) is not None:
        code = generate_room_code(settings.ROOM_CODE_LENGTH)
    return code

def create_room(
    db: Database,
    caller_id: str,
    name: str,
    code: Optional[str] = None,
    description: Optional[str] = None,
    max_members: Optional[int] = None,
    is_private: Optional[bool] = None
) -> dict:
    """Create a room with the caller as its first admin"""
    generated = code is None
    if generated:
        code = _generate_unique_code(db)
    else:
        code = normalize_room_code(code)
        if db.rooms.find_one({"code": code}, {"_id": 1}) is not None:
            raise ConflictError(CODE_TAKEN)

    creator = to_object_id(caller_id)
    room = RoomModel(
        name=name,
        code=code,
        creator=creator,
        description=description,
        max_members=max_members or settings.DEFAULT_MAX_MEMBERS,
        is_private=bool(is_private),
        members=[RoomMember(user=creator, role=MemberRole.ADMIN)]
    )

    # The unique index on code settles concurrent creations
    while True:
        try:
            result = db.rooms.insert_one(room.to_dict())
            break
        except DuplicateKeyError:
            if not generated:
                raise ConflictError(CODE_TAKEN)
            logger.info(f"Generated room code {room.code} collided, regenerating")
            room.code = _generate_unique_code(db)

    room._id = result.inserted_id
    users.add_room(db, caller_id, room.id)

    logger.info(f"Room created: {room.name} ({room.code}) by user {caller_id}")
    return serialize_room(db, room)

def _check_can_join(room: RoomModel, caller_id: str) -> None:
    if room.is_member(caller_id):
        raise ConflictError(ALREADY_MEMBER)
    if room.is_full():
        raise ConflictError(ROOM_FULL)

def join_room(db: Database, caller_id: str, code: str) -> dict:
    """Join the room identified by an invite code"""
    room_data = db.rooms.find_one({"code": normalize_room_code(code)})
    if room_data is None:
        raise ResourceNotFoundError(ROOM_NOT_FOUND)

    room = RoomModel.from_dict(room_data)
    _check_can_join(room, caller_id)

    now = get_current_timestamp()
    member = RoomMember(user=caller_id, role=MemberRole.MEMBER, joined_at=now)

    # Membership and capacity are re-checked by the filter so concurrent
    # joins cannot push the room past max_members
    updated = db.rooms.find_one_and_update(
        {
            "_id": room.id,
            "members.user": {"$ne": member.user},
            f"members.{room.max_members - 1}": {"$exists": False}
        },
        {
            "$push": {"members": member.to_dict()},
            "$set": {"last_activity": now, "updated_at": now}
        },
        return_document=ReturnDocument.AFTER
    )

    if updated is None:
        latest = db.rooms.find_one({"_id": room.id})
        if latest is None:
            raise ResourceNotFoundError(ROOM_NOT_FOUND)
        _check_can_join(RoomModel.from_dict(latest), caller_id)
        raise ConflictError(ROOM_FULL)

    users.add_room(db, caller_id, room.id)

    logger.info(f"User {caller_id} joined room {room.id} ({room.code})")
    return serialize_room(db, RoomModel.from_dict(updated))

def list_my_rooms(db: Database, caller_id: str) -> List[dict]:
    """Rooms referenced by the caller's user record, in that order"""
    user = users.get_user(db, caller_id)
    if user is None:
        raise ResourceNotFoundError(USER_NOT_FOUND)

    if not user.rooms:
        return []

    room_docs = {room_data["_id"]: room_data for room_data in db.rooms.find({"_id": {"$in": user.rooms}})}
    rooms = [RoomModel.from_dict(room_docs[room_id]) for room_id in user.rooms if room_id in room_docs]
    return serialize_rooms(db, rooms)

def get_room(db: Database, caller_id: str, room_id: str) -> dict:
    room = load_room(db, room_id)
    require_member(room, caller_id)
    return serialize_room(db, room)

def leave_room(db: Database, caller_id: str, room_id: str) -> None:
    """Remove the caller from the room; admin roles are not reassigned"""
    room = load_room(db, room_id)
    caller = to_object_id(caller_id)
    now = get_current_timestamp()

    db.rooms.update_one(
        {"_id": room.id},
        {
            "$pull": {"members": {"user": caller}},
            "$set": {"last_activity": now, "updated_at": now}
        }
    )
    users.remove_room(db, caller_id, room.id)

    leaving = room.get_member(caller_id)
    if leaving is not None and leaving.is_admin():
        remaining_admins = [m for m in room.members if m.is_admin() and m.user != caller]
        if not remaining_admins:
            logger.info(f"Room {room.id} has no admin left after user {caller_id} left")

    logger.info(f"User {caller_id} left room {room.id}")
