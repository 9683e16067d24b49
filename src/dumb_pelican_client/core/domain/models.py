"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of token files we do not control (HTCondor writes them).
- Self-documenting fields (Field) without coupling the core to I/O libraries.

Note:
- These models describe *what* a credential/transfer/resolution is, not *how*
  it is obtained.
"""

from __future__ import annotations

import random
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from dumb_pelican_client.core.errors import PelicanError

OSDF_URL_PREFIX = "osdf://"


class Verb(str, Enum):
    """Transfer direction."""

    GET = "get"
    PUT = "put"

    def required_scopes(self) -> tuple[str, ...]:
        """WLCG storage scopes that authorize this verb (any one suffices)."""

        if self is Verb.GET:
            return ("storage.read",)
        return ("storage.create", "storage.modify")


class Credential(BaseModel):
    """A bearer token as deposited by HTCondor in a `*.use` file.

    Why extra="ignore":
    - The credd adds fields over time; we only need token, expiry and scope.
    """

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(
        ...,
        min_length=1,
        description="Opaque bearer token sent in the Authorization header.",
    )
    token_type: str = Field(
        default="bearer",
        description="Token type as reported by the issuer.",
    )
    expires_in: int | None = Field(
        default=None,
        description="Lifetime in seconds at issue time.",
    )
    expires_at: float | None = Field(
        default=None,
        description="Expiry as UNIX epoch seconds. Missing means never expires.",
    )
    scope: list[str] = Field(
        default_factory=list,
        description="Scopes like `storage.read:/some/path`.",
    )

    @field_validator("scope", mode="before")
    @classmethod
    def _split_scope_string(cls, value: Any) -> Any:
        # OAuth2 token responses carry scope as one space-separated string.
        if isinstance(value, str):
            return value.split()
        return value

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def authorizes(self, verb: Verb, path: str) -> bool:
        """True if any scope grants `verb` on a prefix of `path`."""

        allowed = verb.required_scopes()
        for scope in self.scope:
            name, sep, prefix = scope.partition(":")
            if not sep:
                continue
            if name in allowed and path.startswith(prefix):
                return True
        return False

    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"


class TransferRequest(BaseModel):
    """One `object get`/`object put` invocation."""

    url: str = Field(..., min_length=1, description="Logical `osdf://` object URL.")
    filename: Path = Field(..., description="Local source (put) or destination (get).")
    verb: Verb


class PelicanInfo(BaseModel):
    """Where the director says a namespace is served.

    `origins` are base URLs; the object path below the namespace is joined
    onto whichever origin is picked.
    """

    origins: list[str] = Field(default_factory=list)
    namespace: str = Field(..., description="Namespace prefix, e.g. `/icecube/wipac`.")

    @property
    def osdf_prefix(self) -> str:
        return f"{OSDF_URL_PREFIX}{self.namespace}"

    def object_path(self, url: str) -> str:
        """Path of `url` relative to the namespace."""

        prefix = self.osdf_prefix
        if not url.startswith(prefix):
            raise PelicanError(f"url does not match OSDF prefix {prefix!r}")
        return url[len(prefix):]

    def endpoint_url(self, origin: str, url: str) -> str:
        return urljoin(origin, self.object_path(url))

    def candidate_origins(self, rng: random.Random | None = None) -> list[str]:
        """Origins in random order, so load spreads across the federation."""

        if not self.origins:
            raise PelicanError("No origins available")
        out = list(self.origins)
        (rng or random).shuffle(out)
        return out
