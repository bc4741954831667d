"""
The M-Pesa client handle and the dispatch pipeline shared by every service.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

import requests

from ..services import (
    AccountBalanceBuilder,
    B2bBuilder,
    B2cBuilder,
    BulkInvoiceBuilder,
    C2bRegisterBuilder,
    C2bSimulateBuilder,
    CancelInvoiceBuilder,
    DynamicQrBuilder,
    MpesaExpressBuilder,
    MpesaExpressQueryBuilder,
    OnboardBuilder,
    OnboardModifyBuilder,
    ReconciliationBuilder,
    SingleInvoiceBuilder,
    TransactionReversalBuilder,
    TransactionStatusBuilder,
)
from .auth import AccessToken, authenticate, parse_gateway_error
from .concurrency import SecretStore
from .crypto import CredentialEncryptor, get_encryptor
from .environment import ApiEnvironment
from .errors import HttpStatusError, MpesaError, ProtocolError, TransportError
from .payloads import GatewayRequest

__all__ = [
    "DEFAULT_INITIATOR_PASSWORD",
    "DEFAULT_TIMEOUT_SECONDS",
    "Mpesa",
]

# Published sandbox test credential, used until set_initiator_password is called
DEFAULT_INITIATOR_PASSWORD = "Safaricom999!*!"
DEFAULT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


class _ClientCore:
    """State shared by a client handle and all of its clones."""

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        environment: ApiEnvironment,
        session: requests.Session,
        encryptor: CredentialEncryptor,
        timeout_seconds: float,
        initiator_password: Optional[str],
    ) -> None:
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.environment = environment
        self.session = session
        self.encryptor = encryptor
        self.timeout_seconds = timeout_seconds
        self.initiator_password = SecretStore(
            DEFAULT_INITIATOR_PASSWORD, initiator_password
        )


def _parse_response(response_type: Any, response: requests.Response) -> Any:
    status = response.status_code
    text = response.text

    if not 200 <= status < 300:
        rejected = parse_gateway_error(status, text)
        if rejected is not None:
            raise rejected
        raise HttpStatusError(status, text)

    try:
        payload = response.json()
    except ValueError as exc:
        raise ProtocolError(f"Response body is not JSON: {exc}", text) from exc
    try:
        return response_type.from_response(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise ProtocolError(
            f"Response does not match {response_type.__name__}: missing or invalid {exc}",
            text,
        ) from exc


class Mpesa:
    """
    Client for the M-Pesa gateway.

    A single instance (or any of its :meth:`clone` copies) can be shared by
    many threads. The consumer credentials and environment are fixed at
    construction; the initiator password can be replaced at any time and every
    clone sees the new value.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        environment: ApiEnvironment,
        *,
        session: Optional[requests.Session] = None,
        encryptor: Optional[CredentialEncryptor] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        initiator_password: Optional[str] = None,
    ) -> None:
        if not consumer_key:
            raise ValueError("consumer_key must not be empty")
        if not consumer_secret:
            raise ValueError("consumer_secret must not be empty")
        if not isinstance(environment, ApiEnvironment):
            raise TypeError(
                "environment must provide base_url() and get_certificate()"
            )
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = "mpesa-client"

        self._core = _ClientCore(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            environment=environment,
            session=session,
            encryptor=encryptor or get_encryptor(),
            timeout_seconds=timeout_seconds,
            initiator_password=initiator_password,
        )

    @classmethod
    def _from_core(cls, core: _ClientCore) -> "Mpesa":
        handle = cls.__new__(cls)
        handle._core = core
        return handle

    def clone(self) -> "Mpesa":
        """Return another handle on the same shared state."""
        return self._from_core(self._core)

    __copy__ = clone

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(consumer_key={self.consumer_key!r}, "
            f"environment={self.environment!r})"
        )

    @property
    def consumer_key(self) -> str:
        return self._core.consumer_key

    @property
    def environment(self) -> ApiEnvironment:
        return self._core.environment

    @property
    def base_url(self) -> str:
        return self._core.environment.base_url().rstrip("/")

    @property
    def session(self) -> requests.Session:
        return self._core.session

    @property
    def encryptor(self) -> CredentialEncryptor:
        return self._core.encryptor

    @property
    def timeout_seconds(self) -> float:
        return self._core.timeout_seconds

    def initiator_password(self) -> str:
        """
        Return the current initiator password.

        Falls back to the sandbox test password when none was set.
        """
        return self._core.initiator_password.get()

    def set_initiator_password(self, initiator_password: str) -> None:
        """
        Replace the initiator password for this handle and all its clones.

        Required in production for account balance, B2B, B2C, transaction
        status and transaction reversal.
        """
        if not isinstance(initiator_password, str) or not initiator_password:
            raise ValueError("initiator_password must be a non-empty string")
        self._core.initiator_password.set(initiator_password)

    def uses_default_initiator_password(self) -> bool:
        """True until an initiator password is configured or set."""
        return self._core.initiator_password.is_default()

    def authenticate(self) -> AccessToken:
        return authenticate(
            self._core.session,
            self._core.consumer_key,
            self._core.consumer_secret,
            self.base_url,
            timeout=self._core.timeout_seconds,
        )

    def is_connected(self) -> bool:
        """Check whether the gateway accepts our consumer credentials."""
        try:
            self.authenticate()
        except MpesaError:
            return False
        return True

    def security_credential(self) -> str:
        """
        Encrypt the current initiator password with the environment certificate.
        """
        password = self.initiator_password()
        certificate = self._core.environment.get_certificate()
        return self._core.encryptor.encrypt(certificate, password)

    def dispatch(self, request: GatewayRequest) -> Any:
        """
        Send ``request`` and return an instance of ``request.response_type``.

        Steps run strictly in order: authenticate, encrypt the security
        credential when the request needs one, POST, parse. Nothing is
        retried.
        """
        token = self.authenticate()

        if request.requires_credential:
            request = dataclasses.replace(
                request, security_credential=self.security_credential()
            )

        url = f"{self.base_url}/{request.path.lstrip('/')}"
        logger.info("Submitting %s to %s", type(request).__name__, url)

        try:
            response = self._core.session.post(
                url,
                json=request.to_wire(),
                headers={
                    "Authorization": token.authorization_header(),
                    "Accept": "application/json",
                },
                timeout=self._core.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        return _parse_response(request.response_type, response)

    def close(self) -> None:
        """Close the shared HTTP session, for every clone."""
        self._core.session.close()

    def __enter__(self) -> "Mpesa":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def account_balance(self, initiator_name: str) -> AccountBalanceBuilder:
        return AccountBalanceBuilder(self).initiator_name(initiator_name)

    def b2b(self, initiator_name: str) -> B2bBuilder:
        return B2bBuilder(self).initiator_name(initiator_name)

    def b2c(self, initiator_name: str) -> B2cBuilder:
        return B2cBuilder(self).initiator_name(initiator_name)

    def transaction_status(self, initiator_name: str) -> TransactionStatusBuilder:
        return TransactionStatusBuilder(self).initiator_name(initiator_name)

    def transaction_reversal(self) -> TransactionReversalBuilder:
        return TransactionReversalBuilder(self)

    def c2b_register(self) -> C2bRegisterBuilder:
        return C2bRegisterBuilder(self)

    def c2b_simulate(self) -> C2bSimulateBuilder:
        return C2bSimulateBuilder(self)

    def dynamic_qr(self) -> DynamicQrBuilder:
        return DynamicQrBuilder(self)

    def express_request(self) -> MpesaExpressBuilder:
        return MpesaExpressBuilder(self)

    def express_query(self) -> MpesaExpressQueryBuilder:
        return MpesaExpressQueryBuilder(self)

    def onboard(self) -> OnboardBuilder:
        return OnboardBuilder(self)

    def onboard_modify(self) -> OnboardModifyBuilder:
        return OnboardModifyBuilder(self)

    def bulk_invoice(self) -> BulkInvoiceBuilder:
        return BulkInvoiceBuilder(self)

    def single_invoice(self) -> SingleInvoiceBuilder:
        return SingleInvoiceBuilder(self)

    def cancel_invoice(self) -> CancelInvoiceBuilder:
        return CancelInvoiceBuilder(self)

    def reconciliation(self) -> ReconciliationBuilder:
        return ReconciliationBuilder(self)
