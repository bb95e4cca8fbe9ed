from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .auth import (
    DEFAULT_LOGIN_URL,
    AccessTokenAuthenticationFlow,
    AuthenticationFlow,
    ClientCredentialsAuthenticationFlow,
    UsernamePasswordAuthenticationFlow,
)
from .exceptions import MissingCredentialsError

_logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "v28.0"


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Connection settings for the Salesforce REST API."""

    # password | client_credentials | access_token
    auth_flow: str = "password"

    # Base login URL (not the instance URL)
    login_url: str = DEFAULT_LOGIN_URL

    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    username: Optional[str] = None
    password: Optional[str] = None
    security_token: Optional[str] = None

    # Pre-issued token / instance URL for the access_token flow
    access_token: Optional[str] = None
    instance_url: Optional[str] = None

    api_version: str = DEFAULT_API_VERSION
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> SFConfig:
        """Load configuration from environment variables."""
        return cls(
            auth_flow=os.getenv("SF_AUTH_FLOW", "password"),
            login_url=os.getenv("SF_LOGIN_URL", DEFAULT_LOGIN_URL),
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            username=os.getenv("SF_USERNAME"),
            password=os.getenv("SF_PASSWORD"),
            security_token=os.getenv("SF_SECURITY_TOKEN"),
            access_token=os.getenv("SF_ACCESS_TOKEN"),
            instance_url=os.getenv("SF_INSTANCE_URL"),
            api_version=os.getenv("SF_API_VERSION") or DEFAULT_API_VERSION,
            timeout=float(os.getenv("SF_TIMEOUT") or 30.0),
        )


def _check_missing(**required: Optional[str]) -> None:
    missing = [f"SF_{name.upper()}" for name, value in required.items() if not value]
    if missing:
        raise MissingCredentialsError(missing)


def build_authentication_flow(cfg: SFConfig) -> AuthenticationFlow:
    """Return the authentication flow selected by ``cfg.auth_flow``."""
    flow = cfg.auth_flow
    _logger.debug("Selecting auth flow: %s", flow)

    if flow == "access_token":
        _check_missing(access_token=cfg.access_token, instance_url=cfg.instance_url)
        return AccessTokenAuthenticationFlow(cfg.access_token, cfg.instance_url)  # type: ignore[arg-type]

    if flow == "client_credentials":
        _check_missing(client_id=cfg.client_id, client_secret=cfg.client_secret)
        return ClientCredentialsAuthenticationFlow(
            cfg.client_id,  # type: ignore[arg-type]
            cfg.client_secret,  # type: ignore[arg-type]
            login_url=cfg.login_url,
            timeout=cfg.timeout,
        )

    if flow == "password":
        _check_missing(
            client_id=cfg.client_id,
            client_secret=cfg.client_secret,
            username=cfg.username,
            password=cfg.password,
        )
        return UsernamePasswordAuthenticationFlow(
            cfg.client_id,  # type: ignore[arg-type]
            cfg.client_secret,  # type: ignore[arg-type]
            cfg.username,  # type: ignore[arg-type]
            cfg.password,  # type: ignore[arg-type]
            security_token=cfg.security_token or "",
            login_url=cfg.login_url,
            timeout=cfg.timeout,
        )

    raise ValueError(f"Unsupported SF_AUTH_FLOW: {flow!r}")
