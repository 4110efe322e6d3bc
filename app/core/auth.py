from flask_jwt_extended import get_jwt_identity, create_access_token
from datetime import timedelta
from typing import Optional
import logging

from .exceptions import AuthenticationError
from .utils import is_valid_object_id

logger = logging.getLogger(__name__)

def get_caller_id() -> str:
    """
    Caller identity of the current request.

    Tokens are issued by the authentication service with the user's id as
    their identity; call from within a ``jwt_required`` view.
    """
    identity = get_jwt_identity()
    if not is_valid_object_id(identity):
        logger.warning(f"Rejected token with malformed identity: {identity!r}")
        raise AuthenticationError("Identité de l'utilisateur invalide")
    return identity

def issue_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """Mint an access token for a user id (scripts and tests)"""
    expires_delta = timedelta(minutes=expires_minutes) if expires_minutes else None
    return create_access_token(identity=str(user_id), expires_delta=expires_delta)
