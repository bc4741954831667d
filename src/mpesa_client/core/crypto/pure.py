"""
Credential encryption without OpenSSL.

X.509 parsing is done with ``pyasn1-modules`` (RFC 5280 structures) and the
PKCS#1 v1.5 encryption with the pure-Python ``rsa`` package.
"""

from __future__ import annotations

import base64

import rsa
from pyasn1.codec.der import decoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc5280

from ..errors import EncryptionFailed, InvalidCertificate
from . import CertificateData, KeyMaterial, decode_key_material

__all__ = ["PureRsaEncryptor"]

_RSA_ENCRYPTION_OID = "1.2.840.113549.1.1.1"


def _from_spki(spki) -> rsa.PublicKey:
    algorithm = str(spki["algorithm"]["algorithm"])
    if algorithm != _RSA_ENCRYPTION_OID:
        raise InvalidCertificate(f"Public key algorithm {algorithm} is not RSA")
    return rsa.PublicKey.load_pkcs1(spki["subjectPublicKey"].asOctets(), format="DER")


def _from_certificate(der: bytes) -> rsa.PublicKey:
    certificate, _ = decoder.decode(der, asn1Spec=rfc5280.Certificate())
    return _from_spki(certificate["tbsCertificate"]["subjectPublicKeyInfo"])


def _from_public_key(der: bytes) -> rsa.PublicKey:
    spki, _ = decoder.decode(der, asn1Spec=rfc5280.SubjectPublicKeyInfo())
    return _from_spki(spki)


def _from_pkcs1(der: bytes) -> rsa.PublicKey:
    return rsa.PublicKey.load_pkcs1(der, format="DER")


_LOADERS = {
    "CERTIFICATE": (_from_certificate,),
    "PUBLIC KEY": (_from_public_key,),
    "RSA PUBLIC KEY": (_from_pkcs1,),
    "": (_from_certificate, _from_public_key, _from_pkcs1),
}


class PureRsaEncryptor:
    name = "pure"

    def load_public_key(self, certificate: CertificateData) -> rsa.PublicKey:
        material: KeyMaterial = decode_key_material(certificate)
        last_error: Exception | None = None
        for loader in _LOADERS[material.label]:
            try:
                return loader(material.der)
            except (PyAsn1Error, ValueError, TypeError, KeyError) as exc:
                last_error = exc
        raise InvalidCertificate(f"Unable to load public key: {last_error}") from last_error

    def encrypt(self, certificate: CertificateData, plaintext: str) -> str:
        key = self.load_public_key(certificate)
        try:
            ciphertext = rsa.encrypt(plaintext.encode("utf-8"), key)
        except OverflowError as exc:
            raise EncryptionFailed(
                f"RSA encryption with a {key.n.bit_length()}-bit key failed: {exc}"
            ) from exc
        return base64.b64encode(ciphertext).decode("ascii")
