"""
Security-credential encryption.

The gateway authenticates privileged requests by decrypting a "security
credential": the initiator password encrypted with RSA PKCS#1 v1.5 under the
public key of the environment's certificate, then base64 encoded.

Two backends implement :class:`CredentialEncryptor`:

``cryptography``
    OpenSSL primitives via the ``cryptography`` package (default).
``pure``
    A pure-Python stack (``rsa`` + ``pyasn1-modules``), installed with the
    ``pure`` extra for platforms without OpenSSL.

Backends are only imported when :func:`get_encryptor` selects them.
"""

from __future__ import annotations

import base64
import binascii
import importlib
import re
from dataclasses import dataclass
from typing import Optional, Protocol, Union

from ..errors import InvalidCertificate

__all__ = [
    "BACKENDS",
    "CredentialEncryptor",
    "DEFAULT_BACKEND",
    "KeyMaterial",
    "decode_key_material",
    "get_encryptor",
]

CertificateData = Union[str, bytes]

DEFAULT_BACKEND = "cryptography"

BACKENDS = {
    "cryptography": ".openssl:CryptographyEncryptor",
    "pure": ".pure:PureRsaEncryptor",
}

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)

_SUPPORTED_LABELS = ("CERTIFICATE", "PUBLIC KEY", "RSA PUBLIC KEY")


class CredentialEncryptor(Protocol):
    name: str

    def encrypt(self, certificate: CertificateData, plaintext: str) -> str:
        ...


@dataclass(frozen=True)
class KeyMaterial:
    """
    DER bytes extracted from whatever the environment handed us.

    ``label`` is the PEM label (``CERTIFICATE``, ``PUBLIC KEY`` or
    ``RSA PUBLIC KEY``) or the empty string when the input was bare DER or
    bare base64 and the backend has to work out what it holds.
    """

    label: str
    der: bytes
    pem: Optional[bytes] = None


def _b64decode(data: bytes) -> bytes:
    return base64.b64decode(b"".join(data.split()), validate=True)


def decode_key_material(certificate: CertificateData) -> KeyMaterial:
    if isinstance(certificate, str):
        data = certificate.encode("utf-8")
    else:
        data = bytes(certificate)
    raw = data
    data = data.strip()
    if not data:
        raise InvalidCertificate("Certificate data is empty")

    match = _PEM_BLOCK.search(data)
    if match is not None:
        label = match.group(1).decode("ascii")
        if label not in _SUPPORTED_LABELS:
            raise InvalidCertificate(f"Unsupported PEM block '{label}'")
        try:
            der = _b64decode(match.group(2))
        except binascii.Error as exc:
            raise InvalidCertificate(f"PEM block '{label}' is not valid base64") from exc
        return KeyMaterial(label=label, der=der, pem=match.group(0))

    if b"-----BEGIN" in data:
        raise InvalidCertificate("Truncated or malformed PEM data")

    try:
        return KeyMaterial(label="", der=_b64decode(data))
    except binascii.Error:
        # 0x30 is an ASN.1 SEQUENCE, which is how every DER key and cert starts
        if raw[:1] == b"\x30":
            return KeyMaterial(label="", der=raw)
        raise InvalidCertificate("Certificate is neither PEM, base64 nor DER") from None


def get_encryptor(name: str = DEFAULT_BACKEND) -> CredentialEncryptor:
    """
    Instantiate the encryption backend registered under ``name``.
    """
    key = name.strip().lower()
    try:
        target = BACKENDS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown crypto backend '{name}', expected one of: {', '.join(BACKENDS)}"
        ) from exc
    module_name, _, class_name = target.partition(":")
    try:
        module = importlib.import_module(module_name, __name__)
    except ImportError as exc:
        raise ValueError(
            f"Crypto backend '{key}' is not available ({exc}); "
            f"install mpesa-client[{key}]"
        ) from exc
    return getattr(module, class_name)()
