"""
Public facade for the M-Pesa gateway client package.

The most useful pieces are re-exported here so integrators can
``from mpesa_client import ...`` without navigating the package.
"""

from .api import create_client
from .core import (
    AccessToken,
    ApiEnvironment,
    AuthenticationFailed,
    AuthFailureReason,
    ClientConfig,
    ClientParameters,
    CommandId,
    ConfigError,
    CustomEnvironment,
    EncryptionError,
    EncryptionFailed,
    Environment,
    GatewayRejected,
    HttpStatusError,
    IdentifierType,
    InvalidCertificate,
    Mpesa,
    MpesaError,
    ProtocolError,
    QrTransactionCode,
    ResponseType,
    SendRemindersTypes,
    TransactionType,
    TransportError,
    ValidationFailed,
    load_client_config,
    load_env_file,
)
from .services import Invoice, InvoiceItem

__all__ = (
    "AccessToken",
    "ApiEnvironment",
    "AuthFailureReason",
    "AuthenticationFailed",
    "ClientConfig",
    "ClientParameters",
    "CommandId",
    "ConfigError",
    "CustomEnvironment",
    "EncryptionError",
    "EncryptionFailed",
    "Environment",
    "GatewayRejected",
    "HttpStatusError",
    "IdentifierType",
    "InvalidCertificate",
    "Invoice",
    "InvoiceItem",
    "Mpesa",
    "MpesaError",
    "ProtocolError",
    "QrTransactionCode",
    "ResponseType",
    "SendRemindersTypes",
    "TransactionType",
    "TransportError",
    "ValidationFailed",
    "create_client",
    "load_client_config",
    "load_env_file",
)
