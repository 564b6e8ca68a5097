from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a goal, assumption or actual fails boundary validation."""

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        self.field = field
        self.constraint = constraint
        self.value = value
        super().__init__(f"{field} {constraint} (got {value!r})")
