from typing import Any, Dict, Optional
from http import HTTPStatus

class CustomHTTPException(Exception):
    """Custom HTTP exception with additional error information (Flask-compatible)"""
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_type: str = "general_error",
        extra_data: Optional[Dict[str, Any]] = None
    ):
        super().__init__(detail)
        self.status_code = int(status_code)
        self.detail = detail
        self.error_type = error_type
        self.extra_data = extra_data or {}

    def to_response_dict(self) -> Dict[str, Any]:
        """JSON body returned to the client"""
        body = {"message": self.detail}
        body.update(self.extra_data)
        return body

class ValidationError(CustomHTTPException):
    """Validation error exception"""
    def __init__(self, message: str = "Données invalides", details: str = None):
        extra_data = {}
        if details:
            extra_data["details"] = details

        super().__init__(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=message,
            error_type="validation_error",
            extra_data=extra_data
        )

class ResourceNotFoundError(CustomHTTPException):
    """Resource not found exception"""
    def __init__(self, message: str):
        super().__init__(
            status_code=HTTPStatus.NOT_FOUND,
            detail=message,
            error_type="resource_not_found"
        )

class AuthorizationError(CustomHTTPException):
    """Authorization error exception"""
    def __init__(self, message: str = "Accès refusé"):
        super().__init__(
            status_code=HTTPStatus.FORBIDDEN,
            detail=message,
            error_type="authorization_error"
        )

class ConflictError(CustomHTTPException):
    """Conflict error exception"""
    def __init__(self, message: str):
        super().__init__(
            status_code=HTTPStatus.CONFLICT,
            detail=message,
            error_type="conflict_error"
        )


class AuthenticationError(CustomHTTPException):
    """Missing or unusable caller identity"""
    def __init__(self, message: str = "Authentification requise"):
        super().__init__(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail=message,
            error_type="authentication_error"
        )
