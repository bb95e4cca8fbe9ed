from __future__ import annotations

from typing import List, Optional, Sequence


class SalesforceError(Exception):
    """Base class for every error raised by sfclient itself."""


class InvalidArgumentError(SalesforceError, ValueError):
    """Raised when a required argument is None or empty."""

    def __init__(self, name: str, reason: str = "cannot be None or empty"):
        self.name = name
        super().__init__(f"Argument '{name}' {reason}.")


class NotAuthenticatedError(SalesforceError, RuntimeError):
    """Raised when an API operation is attempted before authenticate()."""

    def __init__(self) -> None:
        super().__init__(
            "Please, execute authenticate() before calling any REST API operation."
        )


class SalesforceApiError(SalesforceError):
    """The REST API rejected a request (HTTP status above 299)."""

    def __init__(
        self,
        code: str,
        message: str,
        fields: Optional[Sequence[str]] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.fields: Optional[List[str]] = list(fields) if fields is not None else None
        self.status_code = status_code
        text = f"{code}: {message}"
        if self.fields:
            text += f" (fields: {', '.join(self.fields)})"
        super().__init__(text)


class SalesforceAuthenticationError(SalesforceError):
    """Raised when an authentication flow cannot obtain an access token."""

    def __init__(self, error: str, description: str = ""):
        self.error = error
        self.description = description
        super().__init__(f"{error}: {description}" if description else error)


class MissingCredentialsError(SalesforceError, RuntimeError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class JsonShapeError(SalesforceError, TypeError):
    """A JSON value did not have the shape the caller asked for."""
