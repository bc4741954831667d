"""
Credential encryption backed by OpenSSL through ``cryptography``.
"""

from __future__ import annotations

import base64

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import (
    load_der_public_key,
    load_pem_public_key,
)

from ..errors import EncryptionFailed, InvalidCertificate
from . import CertificateData, KeyMaterial, decode_key_material

__all__ = ["CryptographyEncryptor"]


def _load_unlabelled(der: bytes):
    try:
        return x509.load_der_x509_certificate(der).public_key()
    except ValueError:
        return load_der_public_key(der)


def _load_key(material: KeyMaterial):
    if material.label == "CERTIFICATE":
        return x509.load_der_x509_certificate(material.der).public_key()
    if material.label == "RSA PUBLIC KEY" and material.pem is not None:
        return load_pem_public_key(material.pem)
    if material.label == "PUBLIC KEY":
        return load_der_public_key(material.der)
    return _load_unlabelled(material.der)


class CryptographyEncryptor:
    name = "cryptography"

    def load_public_key(self, certificate: CertificateData) -> rsa.RSAPublicKey:
        material = decode_key_material(certificate)
        try:
            key = _load_key(material)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidCertificate(f"Unable to load public key: {exc}") from exc
        if not isinstance(key, rsa.RSAPublicKey):
            raise InvalidCertificate(
                f"Certificate carries a {type(key).__name__}, not an RSA public key"
            )
        return key

    def encrypt(self, certificate: CertificateData, plaintext: str) -> str:
        key = self.load_public_key(certificate)
        try:
            ciphertext = key.encrypt(plaintext.encode("utf-8"), padding.PKCS1v15())
        except ValueError as exc:
            raise EncryptionFailed(
                f"RSA encryption with a {key.key_size}-bit key failed: {exc}"
            ) from exc
        return base64.b64encode(ciphertext).decode("ascii")
