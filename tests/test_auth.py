"""Unit tests for the token exchange."""

import base64
from unittest.mock import MagicMock

import pytest
import requests

from conftest import GATEWAY_URL, TOKEN_BODY, make_response
from mpesa_client.core.auth import (
    AccessToken,
    authenticate,
    basic_auth_header,
    parse_gateway_error,
)
from mpesa_client.core.errors import AuthenticationFailed, AuthFailureReason


def _session(response=None, side_effect=None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.get.return_value = response
    session.get.side_effect = side_effect
    return session


class TestBasicAuthHeader:
    def test_encodes_key_and_secret(self) -> None:
        header = basic_auth_header("key", "secret")

        assert header.startswith("Basic ")
        assert base64.b64decode(header[len("Basic "):]) == b"key:secret"


class TestAuthenticate:
    """Tests for the OAuth client-credentials exchange."""

    def test_returns_token_from_gateway(self) -> None:
        session = _session(make_response(200, TOKEN_BODY))

        token = authenticate(session, "key", "secret", GATEWAY_URL)

        assert token.access_token == "abc123"
        assert token.expires_in == 3599
        assert token.authorization_header() == "Bearer abc123"

    def test_sends_single_get_with_basic_auth(self) -> None:
        session = _session(make_response(200, TOKEN_BODY))

        authenticate(session, "key", "secret", GATEWAY_URL + "/", timeout=5)

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == f"{GATEWAY_URL}/oauth/v1/generate"
        assert kwargs["params"] == {"grant_type": "client_credentials"}
        assert kwargs["headers"]["Authorization"] == basic_auth_header("key", "secret")
        assert kwargs["timeout"] == 5
        session.post.assert_not_called()

    def test_rejected_credentials(self) -> None:
        body = {
            "requestId": "11728-2929992-1",
            "errorCode": "400.008.01",
            "errorMessage": "Invalid Authentication passed",
        }
        session = _session(make_response(400, body))

        with pytest.raises(AuthenticationFailed) as excinfo:
            authenticate(session, "key", "wrong", GATEWAY_URL)

        error = excinfo.value
        assert error.reason is AuthFailureReason.INVALID_CREDENTIALS
        assert error.status_code == 400
        assert error.gateway_error is not None
        assert error.gateway_error.error_code == "400.008.01"
        assert error.retryable is False

    def test_rejected_credentials_with_empty_body(self) -> None:
        session = _session(make_response(401, text=""))

        with pytest.raises(AuthenticationFailed) as excinfo:
            authenticate(session, "key", "wrong", GATEWAY_URL)

        assert excinfo.value.reason is AuthFailureReason.INVALID_CREDENTIALS
        assert excinfo.value.gateway_error is None

    def test_network_failure_is_retryable(self) -> None:
        session = _session(side_effect=requests.ConnectionError("connection refused"))

        with pytest.raises(AuthenticationFailed) as excinfo:
            authenticate(session, "key", "secret", GATEWAY_URL)

        assert excinfo.value.reason is AuthFailureReason.NETWORK
        assert excinfo.value.retryable is True
        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    @pytest.mark.parametrize(
        "response",
        [
            make_response(200, text="<html>maintenance</html>"),
            make_response(200, {"expires_in": "3599"}),
            make_response(200, {"access_token": "abc", "expires_in": "soon"}),
            make_response(200, {"access_token": "", "expires_in": "3599"}),
        ],
    )
    def test_malformed_token_response(self, response: requests.Response) -> None:
        session = _session(response)

        with pytest.raises(AuthenticationFailed) as excinfo:
            authenticate(session, "key", "secret", GATEWAY_URL)

        assert excinfo.value.reason is AuthFailureReason.MALFORMED_RESPONSE


class TestAccessToken:
    def test_expiry(self) -> None:
        token = AccessToken(access_token="abc", expires_in=3599, issued_at=1000.0)

        assert token.expires_at == 4599.0
        assert token.is_expired(now=4598.0) is False
        assert token.is_expired(now=4599.0) is True

    def test_repr_hides_token(self) -> None:
        token = AccessToken(access_token="very-secret-token", expires_in=10)

        assert "very-secret-token" not in repr(token)


class TestParseGatewayError:
    def test_parses_envelope(self) -> None:
        error = parse_gateway_error(
            500,
            '{"requestId": "r-1", "errorCode": "500.001.1001", "errorMessage": "boom"}',
        )

        assert error is not None
        assert error.status_code == 500
        assert error.request_id == "r-1"
        assert error.error_code == "500.001.1001"
        assert error.error_message == "boom"

    @pytest.mark.parametrize(
        "text",
        ["", "not json", "[1, 2]", '{"errorCode": "500.001.1001"}'],
    )
    def test_returns_none_for_other_bodies(self, text: str) -> None:
        assert parse_gateway_error(500, text) is None
