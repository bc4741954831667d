"""Shared fixtures: a throwaway RSA key pair, a self-signed gateway
certificate and a mocked HTTP session that records every call."""

import base64
import datetime
import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

from mpesa_client import CustomEnvironment, Mpesa

GATEWAY_URL = "https://gateway.test"

TOKEN_BODY = {"access_token": "abc123", "expires_in": "3599"}

CONVERSATION_BODY = {
    "ConversationID": "AG_20191219_00005797af5d7d75f652",
    "OriginatorConversationID": "16740-34861180-1",
    "ResponseCode": "0",
    "ResponseDescription": "Accept the service request successfully.",
}


def make_response(
    status_code: int,
    body: Optional[Any] = None,
    *,
    text: Optional[str] = None,
) -> requests.Response:
    """Build a real ``requests.Response`` carrying ``body`` as JSON (or raw ``text``)."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if text is None:
        text = "" if body is None else json.dumps(body)
    response._content = text.encode("utf-8")
    return response


def decrypt(private_key: rsa.RSAPrivateKey, credential: str) -> str:
    return private_key.decrypt(
        base64.b64decode(credential), padding.PKCS1v15()
    ).decode("utf-8")


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate_pem(private_key: rsa.RSAPrivateKey) -> str:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "gateway.test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .sign(private_key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture
def environment(certificate_pem: str) -> CustomEnvironment:
    return CustomEnvironment(url=GATEWAY_URL, certificate=certificate_pem)


@pytest.fixture
def session() -> MagicMock:
    """A mock session that hands out a valid token and a success envelope."""
    mock = MagicMock(spec=requests.Session)
    mock.get.return_value = make_response(200, TOKEN_BODY)
    mock.post.return_value = make_response(200, CONVERSATION_BODY)
    return mock


@pytest.fixture
def client(environment: CustomEnvironment, session: MagicMock) -> Mpesa:
    return Mpesa("consumer-key", "consumer-secret", environment, session=session)
