"""
Core primitives: authentication, credential encryption and request dispatch.
"""

from .auth import AccessToken, authenticate
from .client import DEFAULT_INITIATOR_PASSWORD, Mpesa
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .constants import (
    CommandId,
    IdentifierType,
    QrTransactionCode,
    ResponseType,
    SendRemindersTypes,
    TransactionType,
)
from .crypto import CredentialEncryptor, get_encryptor
from .environment import ApiEnvironment, CustomEnvironment, Environment
from .errors import (
    AuthenticationFailed,
    AuthFailureReason,
    EncryptionError,
    EncryptionFailed,
    GatewayRejected,
    HttpStatusError,
    InvalidCertificate,
    MpesaError,
    ProtocolError,
    TransportError,
    ValidationFailed,
)
from .settings import build_settings, load_env_file

__all__ = [
    "AccessToken",
    "ApiEnvironment",
    "AuthFailureReason",
    "AuthenticationFailed",
    "ClientConfig",
    "ClientParameters",
    "CommandId",
    "ConfigError",
    "CredentialEncryptor",
    "CustomEnvironment",
    "DEFAULT_INITIATOR_PASSWORD",
    "EncryptionError",
    "EncryptionFailed",
    "Environment",
    "GatewayRejected",
    "HttpStatusError",
    "IdentifierType",
    "InvalidCertificate",
    "Mpesa",
    "MpesaError",
    "ProtocolError",
    "QrTransactionCode",
    "ResponseType",
    "SendRemindersTypes",
    "TransactionType",
    "TransportError",
    "ValidationFailed",
    "authenticate",
    "build_settings",
    "get_encryptor",
    "load_client_config",
    "load_env_file",
]
