"""Error taxonomy.

Every failure the client can report maps to one of these. Adapters wrap the
underlying httpx/pydantic/OS errors (`raise ... from exc`) so the CLI only has
to catch `PelicanClientError`.
"""

from __future__ import annotations


class PelicanClientError(Exception):
    """Base class for every user-visible failure."""

    kind = "Error"

    def __str__(self) -> str:
        return f"{self.kind}: {super().__str__()}"


class ArgumentError(PelicanClientError):
    """Invalid command-line or configuration value."""

    kind = "ArgumentError"


class CredentialsError(PelicanClientError):
    """No usable token could be found."""

    kind = "CredentialsError"


class PelicanError(PelicanClientError):
    """The federation could not resolve the object URL."""

    kind = "PelicanError"


class TransferError(PelicanClientError):
    """The GET/PUT against every candidate origin failed."""

    kind = "TransferError"
