from unittest.mock import MagicMock, patch

import pytest

from sfclient.auth import (
    AccessTokenAuthenticationFlow,
    AuthenticationInfo,
    ClientCredentialsAuthenticationFlow,
    UsernamePasswordAuthenticationFlow,
    _TokenEndpointFlow,
)
from sfclient.exceptions import InvalidArgumentError, SalesforceAuthenticationError


def _token_response(status_code=200, payload=None):
    r = MagicMock()
    r.status_code = status_code
    r.json.return_value = payload if payload is not None else {}
    r.text = str(payload)
    return r


def test_access_token_flow_returns_given_session():
    flow = AccessTokenAuthenticationFlow("tok", "https://myorg.my.salesforce.com/")

    assert flow.authenticate() == AuthenticationInfo("tok", "https://myorg.my.salesforce.com")


def test_access_token_flow_requires_values():
    with pytest.raises(InvalidArgumentError):
        AccessTokenAuthenticationFlow("", "https://x")


def test_username_password_flow_posts_password_grant():
    flow = UsernamePasswordAuthenticationFlow(
        "cid", "secret", "user@example.com", "pw", security_token="TOKEN",
        login_url="https://test.salesforce.com/",
    )
    response = _token_response(payload={"access_token": "new_token", "instance_url": "https://myorg.my.salesforce.com"})

    with patch.object(flow.session, "post", return_value=response) as m:
        info = flow.authenticate()

    assert info == AuthenticationInfo("new_token", "https://myorg.my.salesforce.com")
    args, kwargs = m.call_args
    assert args[0] == "https://test.salesforce.com/services/oauth2/token"
    assert kwargs["data"] == {
        "grant_type": "password",
        "client_id": "cid",
        "client_secret": "secret",
        "username": "user@example.com",
        "password": "pwTOKEN",
    }


def test_client_credentials_flow_posts_grant():
    flow = ClientCredentialsAuthenticationFlow("cid", "secret")
    response = _token_response(payload={"access_token": "t", "instance_url": "https://x"})

    with patch.object(flow.session, "post", return_value=response) as m:
        flow.authenticate()

    assert m.call_args.kwargs["data"]["grant_type"] == "client_credentials"


def test_flow_error_carries_oauth_error():
    flow = UsernamePasswordAuthenticationFlow("cid", "secret", "user", "wrong")
    response = _token_response(400, {"error": "invalid_grant", "error_description": "authentication failure"})

    with patch.object(flow.session, "post", return_value=response):
        with pytest.raises(SalesforceAuthenticationError) as exc_info:
            flow.authenticate()

    assert exc_info.value.error == "invalid_grant"
    assert exc_info.value.description == "authentication failure"


def test_flow_rejects_incomplete_token_response():
    flow = ClientCredentialsAuthenticationFlow("cid", "secret")

    with patch.object(flow.session, "post", return_value=_token_response(payload={"access_token": "t"})):
        with pytest.raises(SalesforceAuthenticationError) as exc_info:
            flow.authenticate()

    assert exc_info.value.error == "invalid_response"


@pytest.mark.parametrize(
    "args",
    [
        ("", "secret", "user", "pw"),
        ("cid", "secret", "", "pw"),
        ("cid", "secret", "user", None),
    ],
)
def test_username_password_flow_requires_values(args):
    with pytest.raises(InvalidArgumentError):
        UsernamePasswordAuthenticationFlow(*args)


def test_token_endpoint_flow_needs_grant_form():
    with pytest.raises(TypeError):
        _TokenEndpointFlow()
