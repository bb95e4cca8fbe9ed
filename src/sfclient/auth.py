"""Authentication flows that produce an access token and instance URL.

Each flow exposes a single ``authenticate()`` call. :class:`SalesforceClient`
only consumes the returned :class:`AuthenticationInfo`.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .exceptions import InvalidArgumentError, SalesforceAuthenticationError

_logger = logging.getLogger(__name__)

DEFAULT_LOGIN_URL = "https://login.salesforce.com"


@dataclass(frozen=True)
class AuthenticationInfo:
    access_token: str
    instance_url: str


class AuthenticationFlow(abc.ABC):
    @abc.abstractmethod
    def authenticate(self) -> AuthenticationInfo:
        """Obtain an access token and the instance URL it is valid for."""


def _require(**values: Optional[str]) -> None:
    for name, value in values.items():
        if not value:
            raise InvalidArgumentError(name)


class AccessTokenAuthenticationFlow(AuthenticationFlow):
    """Use an OAuth token that was issued elsewhere (e.g. cached or from sf CLI)."""

    def __init__(self, access_token: str, instance_url: str) -> None:
        _require(access_token=access_token, instance_url=instance_url)
        self.access_token = access_token
        self.instance_url = instance_url

    def authenticate(self) -> AuthenticationInfo:
        _logger.debug("Using pre-issued access token for %s", self.instance_url)
        return AuthenticationInfo(self.access_token, self.instance_url.rstrip("/"))


class _TokenEndpointFlow(AuthenticationFlow):
    """Shared POST to ``/services/oauth2/token``."""

    grant_type = ""

    def __init__(
        self,
        login_url: str = DEFAULT_LOGIN_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.login_url = login_url
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def token_url(self) -> str:
        return f"{self.login_url.rstrip('/')}/services/oauth2/token"

    @abc.abstractmethod
    def _form(self) -> Dict[str, str]:
        """Grant-specific form fields sent with ``grant_type``."""

    def authenticate(self) -> AuthenticationInfo:
        data = {"grant_type": self.grant_type, **self._form()}
        _logger.info("Requesting access token (%s) from %s", self.grant_type, self.token_url)
        r = self.session.post(self.token_url, data=data, timeout=self.timeout)

        try:
            payload = r.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if r.status_code >= 400:
            raise SalesforceAuthenticationError(
                payload.get("error") or f"HTTP {r.status_code}",
                payload.get("error_description") or r.text,
            )
        if not payload.get("access_token") or not payload.get("instance_url"):
            raise SalesforceAuthenticationError(
                "invalid_response",
                "Token response did not include access_token and instance_url.",
            )
        return AuthenticationInfo(payload["access_token"], payload["instance_url"].rstrip("/"))


class UsernamePasswordAuthenticationFlow(_TokenEndpointFlow):
    """OAuth 2.0 username-password flow.

    ``password`` is sent with the security token appended when one is given.
    """

    grant_type = "password"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
        security_token: str = "",
        login_url: str = DEFAULT_LOGIN_URL,
        **kwargs,
    ) -> None:
        _require(client_id=client_id, client_secret=client_secret, username=username, password=password)
        super().__init__(login_url, **kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.username = username
        self.password = password
        self.security_token = security_token or ""

    def _form(self) -> Dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "username": self.username,
            "password": self.password + self.security_token,
        }


class ClientCredentialsAuthenticationFlow(_TokenEndpointFlow):
    """OAuth 2.0 client-credentials flow."""

    grant_type = "client_credentials"

    def __init__(self, client_id: str, client_secret: str, login_url: str = DEFAULT_LOGIN_URL, **kwargs) -> None:
        _require(client_id=client_id, client_secret=client_secret)
        super().__init__(login_url, **kwargs)
        self.client_id = client_id
        self.client_secret = client_secret

    def _form(self) -> Dict[str, str]:
        return {"client_id": self.client_id, "client_secret": self.client_secret}
