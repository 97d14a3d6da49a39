"""Per-user provider credentials.

The orchestrator only ever reads a :data:`CredentialSet`; where the keys come
from is the store's business.  The bundled :class:`EnvCredentialStore` reads
environment variables and ``*.key`` files on every lookup, so a key written by
the settings side of the application is seen by the very next request.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional

from config import AppConfig, config as default_config
from src.agents.base import ProviderName

logger = logging.getLogger(__name__)

CredentialSet = Mapping[ProviderName, str]


def credential_set(raw: Mapping[str, Optional[str]]) -> CredentialSet:
    """Normalise ``raw`` into a read-only mapping of non-empty keys.

    Keys may be :class:`ProviderName` members or their string values.  Empty
    or ``None`` secrets are dropped; unknown provider names are ignored.
    """
    keys: dict[ProviderName, str] = {}
    for name, secret in raw.items():
        try:
            provider = ProviderName(name)
        except ValueError:
            logger.debug("Ignoring credential for unknown provider %r", name)
            continue
        if secret and secret.strip():
            keys[provider] = secret.strip()
    return MappingProxyType(keys)


class CredentialStore(ABC):
    """Read-only lookup of a user's provider keys."""

    @abstractmethod
    def get_credentials(self, user_id: Optional[str] = None) -> CredentialSet:
        ...


class EnvCredentialStore(CredentialStore):
    """Serves the same deployment-wide keys to every user."""

    def __init__(self, cfg: AppConfig = default_config) -> None:
        self._cfg = cfg

    def get_credentials(self, user_id: Optional[str] = None) -> CredentialSet:
        creds = credential_set({p.value: self._cfg.read_api_key(p.value) for p in ProviderName})
        logger.debug(
            "Credentials for user=%s: %s", user_id or "-", sorted(p.value for p in creds)
        )
        return creds
