"""Validation of instance, user and disk identifiers."""

import re

MAX_LENGTH = 76

_PATTERN = re.compile(r"[A-Za-z0-9]+(?:[._-][A-Za-z0-9]+)*", re.ASCII)


class InvalidIdentifierError(ValueError):
    """Raised when a string is not a valid identifier."""


def validate(identifier: str) -> None:
    """Check that *identifier* is a valid name; raise InvalidIdentifierError if not.

    A valid identifier is made of alphanumeric runs joined by single ".", "_"
    or "-" characters and is at most 76 characters long.
    """
    if not identifier:
        raise InvalidIdentifierError("identifier must not be empty")
    if len(identifier) > MAX_LENGTH:
        raise InvalidIdentifierError(
            f"identifier {identifier!r} greater than maximum length ({MAX_LENGTH} characters)"
        )
    if not _PATTERN.fullmatch(identifier):
        raise InvalidIdentifierError(
            f"identifier {identifier!r} must match pattern {_PATTERN.pattern}"
        )