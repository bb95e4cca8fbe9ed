"""Typed client for the Salesforce REST API."""

from importlib.metadata import PackageNotFoundError, version

from .auth import (
    AccessTokenAuthenticationFlow,
    AuthenticationFlow,
    AuthenticationInfo,
    ClientCredentialsAuthenticationFlow,
    UsernamePasswordAuthenticationFlow,
)
from .client import SalesforceClient
from .config import SFConfig, build_authentication_flow
from .exceptions import (
    InvalidArgumentError,
    JsonShapeError,
    MissingCredentialsError,
    NotAuthenticatedError,
    SalesforceApiError,
    SalesforceAuthenticationError,
    SalesforceError,
)
from .records import QueryResult, RecordCodec, record_projection, sf_field

try:
    __version__ = version("sfclient")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

__all__ = [
    "AccessTokenAuthenticationFlow",
    "AuthenticationFlow",
    "AuthenticationInfo",
    "ClientCredentialsAuthenticationFlow",
    "InvalidArgumentError",
    "JsonShapeError",
    "MissingCredentialsError",
    "NotAuthenticatedError",
    "QueryResult",
    "RecordCodec",
    "SFConfig",
    "SalesforceApiError",
    "SalesforceAuthenticationError",
    "SalesforceClient",
    "SalesforceError",
    "UsernamePasswordAuthenticationFlow",
    "build_authentication_flow",
    "record_projection",
    "sf_field",
]
