"""
Flask Messages Router
Room history, sending, read receipts, edit and delete
"""

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
import logging

from ..database import get_database
from ..core.auth import get_caller_id
from ..core.exceptions import CustomHTTPException
from ..schemas.message import MessageCreate
from ..services import messages

logger = logging.getLogger(__name__)

messages_bp = Blueprint('messages', __name__)

INTERNAL_ERROR = "Erreur interne du serveur"

@messages_bp.route('/room/<room_id>', methods=['GET'])
@jwt_required()
def get_room_messages(room_id):
    """Get a page of messages for a room"""
    try:
        caller_id = get_caller_id()
        result = messages.list_messages(
            get_database(),
            caller_id,
            room_id,
            page=request.args.get('page'),
            limit=request.args.get('limit')
        )
        return jsonify(result)

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la récupération des messages: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@messages_bp.route('/send', methods=['POST'])
@jwt_required()
def send_message():
    """Send a message to a room"""
    try:
        caller_id = get_caller_id()
        payload = MessageCreate.from_request(request.get_json(silent=True))

        message = messages.send_message(
            get_database(),
            caller_id,
            payload.room_id,
            payload.content,
            type=payload.type,
            reply_to=payload.reply_to
        )

        return jsonify({
            "message": "Message envoyé avec succès",
            "data": message
        }), 201

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de l'envoi du message: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@messages_bp.route('/<message_id>/read', methods=['POST'])
@jwt_required()
def mark_message_read(message_id):
    """Mark a message as read by the caller"""
    try:
        caller_id = get_caller_id()
        messages.mark_read(get_database(), caller_id, message_id)

        return jsonify({
            "message": "Message marqué comme lu"
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors du marquage du message: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@messages_bp.route('/<message_id>', methods=['PUT'])
@jwt_required()
def edit_message(message_id):
    """Edit one of the caller's messages"""
    try:
        caller_id = get_caller_id()
        data = request.get_json(silent=True) or {}

        message = messages.edit_message(
            get_database(), caller_id, message_id, data.get('content') if isinstance(data, dict) else None
        )

        return jsonify({
            "message": "Message modifié avec succès",
            "data": message
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la modification du message: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)

@messages_bp.route('/<message_id>', methods=['DELETE'])
@jwt_required()
def delete_message(message_id):
    """Delete one of the caller's messages"""
    try:
        caller_id = get_caller_id()
        messages.delete_message(get_database(), caller_id, message_id)

        return jsonify({
            "message": "Message supprimé avec succès"
        })

    except CustomHTTPException:
        raise
    except Exception as e:
        logger.exception(f"Erreur lors de la suppression du message: {e}")
        raise CustomHTTPException(500, INTERNAL_ERROR)
