"""Resolver primitives: header-bag interface, address classes and exceptions."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when an excluded-network entry is not a valid CIDR.

    Construction aborts on the first bad entry, so the offending string
    is always available as ``cidr``.
    """

    def __init__(self, cidr: str, reason: str = "") -> None:
        message = f"invalid excluded network {cidr!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.cidr = cidr


# ---------------------------------------------------------------------------
# Address classification
# ---------------------------------------------------------------------------


class AddressClass(str, Enum):
    """Outcome of classifying one entry of an address chain."""

    ADMISSIBLE = "admissible"
    EXCLUDED = "excluded"
    INVALID = "invalid"


# ---------------------------------------------------------------------------
# Header bag
# ---------------------------------------------------------------------------


@runtime_checkable
class HeaderBag(Protocol):
    """Capability interface over a request's header storage.

    Header names are matched case-insensitively by every implementation.
    """

    def get_all(self, name: str) -> list[str]:
        """Return every value of ``name`` in the order received."""

    def set(self, name: str, value: str) -> None:
        """Replace all values of ``name`` with a single ``value``."""

    def delete(self, name: str) -> None:
        """Remove ``name`` entirely.  A missing header is not an error."""
