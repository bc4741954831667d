"""
Exception types raised by the M-Pesa client.

Every failure a caller can observe derives from :class:`MpesaError`, so a
single ``except MpesaError`` catches everything the client raises. The
subclasses let callers tell apart "my input was invalid", "the gateway said
no" and "the network misbehaved".
"""

from __future__ import annotations

import enum
from typing import Optional, Sequence

__all__ = [
    "AuthFailureReason",
    "AuthenticationFailed",
    "EncryptionError",
    "EncryptionFailed",
    "GatewayRejected",
    "HttpStatusError",
    "InvalidCertificate",
    "MpesaError",
    "ProtocolError",
    "TransportError",
    "ValidationFailed",
]


class MpesaError(Exception):
    """Base class for every error raised by the client."""

    retryable = False


class AuthFailureReason(str, enum.Enum):
    NETWORK = "network"
    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_RESPONSE = "malformed_response"


class AuthenticationFailed(MpesaError):
    """Raised when no access token could be obtained."""

    def __init__(
        self,
        message: str,
        *,
        reason: AuthFailureReason,
        status_code: Optional[int] = None,
        gateway_error: Optional["GatewayRejected"] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code
        self.gateway_error = gateway_error

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.reason is AuthFailureReason.NETWORK


class EncryptionError(MpesaError):
    """Raised when the security credential cannot be generated."""


class InvalidCertificate(EncryptionError):
    """The certificate (or key) could not be parsed into an RSA public key."""


class EncryptionFailed(EncryptionError):
    """The RSA operation itself failed."""


class ValidationFailed(MpesaError):
    """Raised by a builder when its payload would be incomplete or invalid."""

    def __init__(
        self,
        missing_fields: Sequence[str] = (),
        invalid_fields: Optional[dict[str, str]] = None,
    ) -> None:
        self.missing_fields = tuple(missing_fields)
        self.invalid_fields = dict(invalid_fields or {})
        problems = [f"Field [{name}] is required" for name in self.missing_fields]
        problems.extend(
            f"Field [{name}] is invalid: {why}"
            for name, why in self.invalid_fields.items()
        )
        super().__init__("; ".join(problems))

    @property
    def fields(self) -> tuple[str, ...]:
        return self.missing_fields + tuple(self.invalid_fields)


class GatewayRejected(MpesaError):
    """The gateway answered with its structured error envelope."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        error_message: str,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"requestID: {request_id}, errorCode: {error_code}, "
            f"errorMessage: {error_message}"
        )
        self.status_code = status_code
        self.error_code = error_code
        self.error_message = error_message
        self.request_id = request_id


class HttpStatusError(MpesaError):
    """A non-2xx response whose body was not a gateway error envelope."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Gateway responded with {status_code}: {body}")
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code >= 500 or self.status_code == 429


class ProtocolError(MpesaError):
    """A 2xx response that does not match the expected response shape."""

    def __init__(self, message: str, body: str) -> None:
        super().__init__(message)
        self.body = body


class TransportError(MpesaError):
    """Connection failures and timeouts."""

    retryable = True
