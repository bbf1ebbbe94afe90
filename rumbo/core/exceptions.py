from fastapi import HTTPException, status
from typing import List, Optional

from rumbo.shared.schemas.common import Violation


class RumboError(HTTPException):
    """Error tipado de la API; se serializa como ErrorResponse"""
    error_code = "error"

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class InputValidationError(RumboError):
    error_code = "validation"

    def __init__(self, violations: List[Violation], detail: str = "Datos inválidos"):
        super().__init__(422, detail)
        self.violations = list(violations)


class NotFoundError(RumboError):
    error_code = "not_found"

    def __init__(self, detail: str = "Recurso no encontrado"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class ConflictError(RumboError):
    """El recurso cambió desde que el cliente lo leyó"""
    error_code = "conflict"

    def __init__(self, detail: str = "El recurso fue modificado por otro usuario"):
        super().__init__(status.HTTP_409_CONFLICT, detail)


class UniquenessConflictError(RumboError):
    error_code = "uniqueness_conflict"

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(status.HTTP_409_CONFLICT, detail)
        self.field = field


class InvalidTransitionError(RumboError):
    error_code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"No se puede pasar la entrega de '{current}' a '{requested}'"
        )
        self.current = current
        self.requested = requested


class PersistenceError(RumboError):
    """Fallo de la base de datos; la causa original queda encadenada para el log"""
    error_code = "persistence"

    def __init__(self, detail: str = "Error de base de datos"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


def is_unique_violation(exc: Exception) -> bool:
    """Detectar violación de UNIQUE en Postgres (23505) o SQLite"""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(orig or exc)
