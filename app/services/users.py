"""
User collaborator: room reference bookkeeping and batched profile lookups.

User accounts live in the ``users`` collection and are owned by the
authentication service; this module only touches the ``rooms`` list and
reads profile fields.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence

from bson import ObjectId
from pymongo.database import Database

from ..core.utils import to_object_id
from ..models.user import UserModel, ROOM_PROFILE_FIELDS

logger = logging.getLogger(__name__)

def get_user(db: Database, user_id: str) -> Optional[UserModel]:
    user_data = db.users.find_one({"_id": to_object_id(user_id)})
    if user_data is None:
        return None
    return UserModel.from_dict(user_data)

def add_room(db: Database, user_id: str, room_id: ObjectId) -> None:
    """Reference a room from the user's record"""
    result = db.users.update_one(
        {"_id": to_object_id(user_id)},
        {"$addToSet": {"rooms": room_id}}
    )
    if result.matched_count == 0:
        logger.warning(f"No user record for {user_id}, room {room_id} not referenced")

def remove_room(db: Database, user_id: str, room_id: ObjectId) -> None:
    db.users.update_one(
        {"_id": to_object_id(user_id)},
        {"$pull": {"rooms": room_id}}
    )

def resolve_profiles(
    db: Database,
    user_ids: Iterable[ObjectId],
    fields: Sequence[str] = ROOM_PROFILE_FIELDS
) -> Dict[str, dict]:
    """
    Fetch profile summaries for many users in a single query.

    Returns a mapping of hex id to summary; ids without a user record are
    absent from the mapping.
    """
    unique_ids = list({to_object_id(user_id) for user_id in user_ids})
    if not unique_ids:
        return {}

    projection = {field: 1 for field in fields}
    cursor = db.users.find({"_id": {"$in": unique_ids}}, projection)
    return {
        str(user_data["_id"]): UserModel.from_dict(user_data).to_summary(fields)
        for user_data in cursor
    }
