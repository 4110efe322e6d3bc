"""
Flask Rooms Router
Room creation, invite-code join, membership listing and leave
"""

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
import logging

from ..database import get_database
from ..core.auth import get_caller_id
from ..core.exceptions import CustomHTTPException
from ..schemas.room import RoomCreate, RoomJoin
from ..services import rooms

logger = logging.getLogger(__name__)

rooms_bp = Blueprint('rooms', __name__)

INTERNAL_ERROR = "Erreur interne du serveur"

@rooms_bp.route('/create', methods=['POST'])
@jwt_required()
def create_room():
    """Create a new room"""
    try:
        caller_id = get_caller_id()
        payload = RoomCreate.from_request(request.get_json(silent=True))

        room = rooms.create_room(
            get_database(),
            caller_id,
            name=payload.name,
            code=payload.code,
            description=payload.description,
            max_members=payload.max_members,
            is_private=payload.is_private
        )

        return jsonify({
            "message": "Salle créée avec succès",
            "room": room
        }), 201

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la création de la salle: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@rooms_bp.route('/join', methods=['POST'])
@jwt_required()
def join_room():
    """Join a room with its invite code"""
    try:
        caller_id = get_caller_id()
        payload = RoomJoin.from_request(request.get_json(silent=True))

        room = rooms.join_room(get_database(), caller_id, payload.code)

        return jsonify({
            "message": "Vous avez rejoint la salle avec succès",
            "room": room
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de l'adhésion à la salle: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@rooms_bp.route('/my-rooms', methods=['GET'])
@jwt_required()
def get_my_rooms():
    """Rooms the caller belongs to"""
    try:
        caller_id = get_caller_id()
        return jsonify({
            "rooms": rooms.list_my_rooms(get_database(), caller_id)
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la récupération des salles: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@rooms_bp.route('/<room_id>', methods=['GET'])
@jwt_required()
def get_room(room_id):
    """Room details, members only"""
    try:
        caller_id = get_caller_id()
        return jsonify({
            "room": rooms.get_room(get_database(), caller_id, room_id)
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la récupération de la salle: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@rooms_bp.route('/<room_id>/leave', methods=['POST'])
@jwt_required()
def leave_room(room_id):
    """Leave a room"""
    try:
        caller_id = get_caller_id()
        rooms.leave_room(get_database(), caller_id, room_id)

        return jsonify({
            "message": "Vous avez quitté la salle avec succès"
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la sortie de la salle: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)
