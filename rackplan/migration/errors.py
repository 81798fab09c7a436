"""Migration error types.

A rejected document raises one ``MigrationError`` carrying every
field-attributed problem found by the failing stage.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FieldError:
    path: str           # dotted path, e.g. "racks.0.devices.3.position"
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class MigrationError(Exception):
    """The document was rejected; nothing was accepted."""

    def __init__(self, errors: list[FieldError] | str):
        if isinstance(errors, str):
            errors = [FieldError("", errors)]
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "details": [{"path": e.path, "message": e.message} for e in self.errors],
        }


class LayoutValidationError(MigrationError):
    """Structural or schema check failed."""


class ReferenceIntegrityError(MigrationError):
    """Duplicate ids, or a container child pointing at something it cannot live in."""
