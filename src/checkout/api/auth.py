"""Bearer-secret authorisation for the maintenance trigger endpoints.

The scheduled trigger presents ``CRON_SECRET``; an operator triggering the
sweep by hand presents ``ADMIN_API_KEY`` (or ``CRON_SECRET`` when no admin
key is configured). A deployment without any secret runs the sweep
unauthenticated, which is reported as ``OPEN`` so callers can log it.
"""

import hmac
import os
from dataclasses import dataclass
from enum import Enum


class TriggerAuthorization(Enum):
    AUTHORIZED = "AUTHORIZED"
    UNAUTHORIZED = "UNAUTHORIZED"
    OPEN = "OPEN"


def _env_secret(name):
    return os.getenv(name) or None


@dataclass(frozen=True)
class TriggerSecrets:
    cron_secret: str | None = None
    admin_api_key: str | None = None

    @classmethod
    def from_env(cls) -> "TriggerSecrets":
        return cls(
            cron_secret=_env_secret("CRON_SECRET"),
            admin_api_key=_env_secret("ADMIN_API_KEY"),
        )

    @property
    def scheduled_secret(self) -> str | None:
        return self.cron_secret

    @property
    def manual_secret(self) -> str | None:
        return self.admin_api_key or self.cron_secret


def authorize(authorization_header: str | None, expected_secret: str | None) -> TriggerAuthorization:
    """Compare an ``Authorization`` header against ``Bearer <expected_secret>``."""
    if not expected_secret:
        return TriggerAuthorization.OPEN

    presented = (authorization_header or "").encode()
    if hmac.compare_digest(presented, f"Bearer {expected_secret}".encode()):
        return TriggerAuthorization.AUTHORIZED
    return TriggerAuthorization.UNAUTHORIZED
