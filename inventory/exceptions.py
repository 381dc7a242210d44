"""
Exception hierarchy for the inventory services.

Every exception carries the HTTP status the API layer answers with, so the
handlers registered in ``inventory.main`` can translate any of them without
per-route bookkeeping. Messages are user-facing and must never contain
internal details.
"""


class InventoryError(Exception):
    """Base exception for all inventory failures."""

    status_code: int = 500
    default_message: str = "Error interno del servidor"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(InventoryError):
    """A required field is missing or a value breaks a business rule."""

    status_code = 400
    default_message = "Datos inválidos"


class NotFoundError(InventoryError):
    """The referenced product or category does not exist."""

    status_code = 404
    default_message = "Recurso no encontrado"


class ConflictError(InventoryError):
    """
    A duplicate category name or product identifier was detected.

    The caller is expected to retry with different input.
    """

    status_code = 409
    default_message = "El recurso ya existe"


class StoreError(InventoryError):
    """
    Unclassified failure from the persistence layer.

    The underlying exception is logged where it is caught; only the generic
    message travels to the client.
    """

    status_code = 500
    default_message = "Error en la base de datos"
