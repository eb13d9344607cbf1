"""Domain-level results for report validation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationError:
    """One violated rule; ``field`` points at the offending part of the report."""

    field: str
    message: str

    def __str__(self) -> str:
        return self.message


def format_errors(errors: list[ValidationError]) -> str:
    return "\n".join(f"• {error.message}" for error in errors)
