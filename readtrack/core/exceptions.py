"""Excepciones de dominio de ReadTrack.

Cada clase lleva su código HTTP; los handlers registrados en main.py las
convierten en `{"error": mensaje}` con ese status.
"""


class AppError(Exception):
    """Base de todos los errores de la aplicación."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(AppError):
    status_code = 401
    default_message = "Authentication required"


class InsufficientPermissions(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AppError):
    """Raised when a requested entity does not exist."""

    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    """Uniqueness violation (ISBN, duplicate summary, email...)."""

    status_code = 409
    default_message = "Conflict"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class InternalError(AppError):
    """Fallo inesperado del almacenamiento; el mensaje es siempre genérico."""

    status_code = 500
