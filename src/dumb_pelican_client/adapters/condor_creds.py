"""HTCondor credential directory reader.

HTCondor drops one JSON file per token into the job's credential directory
and exports its location as `_CONDOR_CREDS`. Tokens ready for use end in
`.use`; anything else (`.top`, refresh state) is ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from dumb_pelican_client.core.config import AppSettings
from dumb_pelican_client.core.credentials import CredentialStore
from dumb_pelican_client.core.domain.models import Credential
from dumb_pelican_client.core.errors import CredentialsError

logger = logging.getLogger(__name__)

CRED_FILE_SUFFIX = ".use"


def get_cred_dir(settings: AppSettings | None = None) -> Path:
    settings = settings or AppSettings()
    if settings.condor_creds_dir is None:
        raise CredentialsError("_CONDOR_CREDS env variable not set")
    logger.info("Reading cred directory: %s", settings.condor_creds_dir)
    return settings.condor_creds_dir


def list_cred_files(directory: Path) -> list[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        raise CredentialsError(f"Error reading _CONDOR_CREDS dir {directory}: {exc}") from exc
    return [p for p in entries if p.name.endswith(CRED_FILE_SUFFIX) and p.is_file()]


def load_credential(path: Path) -> Credential:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Credential.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        raise CredentialsError(f"Error reading cred {path.name}: {exc}") from exc


def load_condor_credentials(settings: AppSettings | None = None) -> CredentialStore:
    """Read every `.use` token in `_CONDOR_CREDS`."""

    creds: list[Credential] = []
    for path in list_cred_files(get_cred_dir(settings)):
        logger.info("reading cred %s", path)
        cred = load_credential(path)
        logger.info("found scope %s", cred.scope)
        creds.append(cred)
    return CredentialStore(creds)
