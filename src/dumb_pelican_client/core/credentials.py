"""Credential selection.

Picks, among the tokens found on disk, the one whose scopes cover the verb
and the object path. Reading the tokens is an adapter concern
(`adapters.condor_creds`); this module is pure.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Iterator

from dumb_pelican_client.core.domain.models import Credential, PelicanInfo, TransferRequest
from dumb_pelican_client.core.errors import CredentialsError, PelicanError

logger = logging.getLogger(__name__)


class CredentialStore:
    """The set of tokens available to this invocation."""

    def __init__(self, credentials: Iterable[Credential] = ()) -> None:
        self._credentials = list(credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self) -> Iterator[Credential]:
        return iter(self._credentials)

    def select(
        self,
        request: TransferRequest,
        info: PelicanInfo,
        now: float | None = None,
    ) -> Credential:
        """Return the token to use for `request`.

        An unexpired match wins. If only expired tokens match, the last one
        is returned anyway (the origin may still accept it within its clock
        skew) and a warning is logged.
        """

        try:
            path = info.object_path(request.url)
        except PelicanError as exc:
            raise CredentialsError("url does not match OSDF prefix") from exc

        logger.info(
            "getting correct cred to match scope %s and path: %s",
            list(request.verb.required_scopes()),
            path,
        )

        now = time.time() if now is None else now
        expired: Credential | None = None
        for cred in self._credentials:
            if not cred.authorizes(request.verb, path):
                continue
            if cred.is_expired(now):
                expired = cred
                continue
            return cred

        if expired is not None:
            logger.warning("only valid cred is expired. will try using it anyway")
            return expired
        raise CredentialsError("No matching credentials for url")
