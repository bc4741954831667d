"""
Gateway environments: where requests go and which certificate signs them.

Anything with ``base_url()`` and ``get_certificate()`` methods can be handed
to :class:`mpesa_client.core.client.Mpesa`, which makes it easy to point the
client at a local mock server in tests.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from importlib import resources
from typing import Protocol, runtime_checkable

from .errors import InvalidCertificate

__all__ = [
    "ApiEnvironment",
    "CustomEnvironment",
    "Environment",
]

_BASE_URLS = {
    "sandbox": "https://sandbox.safaricom.co.ke",
    "production": "https://api.safaricom.co.ke",
}


@runtime_checkable
class ApiEnvironment(Protocol):
    def base_url(self) -> str:
        ...

    def get_certificate(self) -> str:
        ...


@dataclass(frozen=True)
class CustomEnvironment:
    """
    An environment defined entirely by the caller.
    """

    url: str
    certificate: str = field(repr=False)

    def base_url(self) -> str:
        return self.url.rstrip("/")

    def get_certificate(self) -> str:
        return self.certificate


def certificate_directory():
    """Where the bundled gateway certificates are installed."""
    return resources.files("mpesa_client").joinpath("certificates")


class Environment(enum.Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def from_name(cls, name: str) -> "Environment":
        normalized = name.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unknown environment '{name}', expected 'sandbox' or 'production'"
        )

    def base_url(self) -> str:
        return _BASE_URLS[self.value]

    def get_certificate(self) -> str:
        """
        Return the gateway certificate bundled for this environment.

        The PEM files live in ``mpesa_client/certificates``. They are read on
        every call so a credential is always derived from what is on disk.
        """
        resource = certificate_directory().joinpath(f"{self.value}.cer")
        try:
            return resource.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise InvalidCertificate(
                f"No certificate bundled for the {self.value} environment; "
                "use Environment.with_certificate() or MPESA_CERTIFICATE_FILE "
                "to supply one"
            ) from exc

    def with_certificate(self, certificate: str) -> CustomEnvironment:
        return CustomEnvironment(url=self.base_url(), certificate=certificate)
