"""Validation errors raised before any argumentation engine runs."""

from __future__ import annotations


class ArgumentationError(Exception):
    """Base exception for framework validation."""

    code = "argumentation_error"
    status_code = 400

    def __init__(self, message: str = "Argumentation framework rejected."):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": "error", "code": self.code, "message": self.message}


class InvalidFramework(ArgumentationError):
    """Raised when an attack names an undeclared argument or no argument is declared."""

    code = "invalid_framework"
    status_code = 422

    def __init__(self, message: str = "Invalid argumentation framework."):
        super().__init__(message)


class FrameworkTooLarge(ArgumentationError):
    """Raised when the argument count exceeds the enumeration cap."""

    code = "framework_too_large"
    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Framework has {size} arguments; at most {limit} can be enumerated."
        )
        self.size = size
        self.limit = limit

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["size"] = self.size
        data["limit"] = self.limit
        return data


class InvalidDocument(ArgumentationError):
    """Raised when a framework document cannot be parsed or fails the schema."""

    code = "invalid_document"
    status_code = 400

    def __init__(self, message: str = "Invalid framework document."):
        super().__init__(message)
