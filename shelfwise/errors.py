from __future__ import annotations
from typing import Optional


class LibraryError(Exception):
    """Base exception for library system errors."""

    code = "error"


class InvalidInput(LibraryError):
    """Creation arguments are missing, malformed or out of range."""

    code = "invalid_input"


class NotFound(LibraryError):
    """Referenced book, member or loan id does not exist."""

    code = "not_found"

    def __init__(self, kind: str, ident: Optional[str] = None) -> None:
        self.kind = kind
        self.ident = ident
        label = kind.capitalize()
        super().__init__(f"{label} not found" if ident is None else f"{label} not found: id={ident}")


class Unavailable(LibraryError):
    """No copies of the book are free at issue time."""

    code = "unavailable"


class AlreadyReturned(LibraryError):
    """The loan has already been returned."""

    code = "already_returned"


class InvariantViolation(LibraryError):
    """Stored state contradicts the copy-count invariant; the write is rejected."""

    code = "invariant_violation"


class HasActiveLoans(LibraryError):
    """Book or member still has ISSUED loans and cannot be removed."""

    code = "has_active_loans"
