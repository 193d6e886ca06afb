"""Domain errors raised by the pantry services."""


class PantryError(Exception):
    """Base class for pantry domain errors."""


class ItemNotFoundError(PantryError, LookupError):
    """An id/source combination that does not resolve to a record."""

    def __init__(self, source: str, item_id: int):
        self.source = source
        self.item_id = item_id
        super().__init__(f"{source} item {item_id} not found")


class InvalidInputError(PantryError, ValueError):
    """Input rejected before touching any store (empty names, unknown sources)."""
