from __future__ import annotations


class RulesError(ValueError):
    """Base class for errors raised by the rules engine."""


class ValidationError(RulesError):
    """Bad input rejected before any character state was touched."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(RulesError, LookupError):
    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} not found: {name}")


class CharacterFileError(Exception):
    pass


__all__ = ["RulesError", "ValidationError", "NotFoundError", "CharacterFileError"]
