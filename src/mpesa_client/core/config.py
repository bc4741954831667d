"""
Configuration objects and helpers for the M-Pesa client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .client import DEFAULT_TIMEOUT_SECONDS
from .crypto import BACKENDS, DEFAULT_BACKEND
from .environment import ApiEnvironment, CustomEnvironment, Environment
from .settings import build_settings

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "load_client_config",
]

_PARAMETER_TO_ENV_KEY = {
    "consumer_key": "MPESA_CONSUMER_KEY",
    "consumer_secret": "MPESA_CONSUMER_SECRET",
    "environment": "MPESA_ENVIRONMENT",
    "initiator_password": "MPESA_INITIATOR_PASSWORD",
    "timeout_seconds": "MPESA_TIMEOUT_SECONDS",
    "crypto_backend": "MPESA_CRYPTO_BACKEND",
    "certificate_file": "MPESA_CERTIFICATE_FILE",
    "base_url": "MPESA_BASE_URL",
}


def _stringify(value: Any) -> str:
    if isinstance(value, Environment):
        return value.value
    return str(value)


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = field(default=None, repr=False)
    environment: Optional[str | Environment] = None
    initiator_password: Optional[str] = field(default=None, repr=False)
    timeout_seconds: Optional[float | int | str] = None
    crypto_backend: Optional[str] = None
    certificate_file: Optional[str | Path] = None
    base_url: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _required(values: Mapping[str, str], key: str) -> str:
    value = (values.get(key) or "").strip()
    if not value:
        raise ConfigError(f"{key} must be provided")
    return value


def _optional(values: Mapping[str, str], key: str) -> Optional[str]:
    value = (values.get(key) or "").strip()
    return value or None


@dataclass(frozen=True)
class _RelocatedEnvironment:
    """A built-in environment's certificate served from another base URL."""

    url: str
    source: Environment

    def base_url(self) -> str:
        return self.url

    def get_certificate(self) -> str:
        return self.source.get_certificate()


@dataclass(frozen=True)
class ClientConfig:
    consumer_key: str
    consumer_secret: str = field(repr=False)
    environment_name: Environment = Environment.SANDBOX
    initiator_password: Optional[str] = field(default=None, repr=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    crypto_backend: str = DEFAULT_BACKEND
    certificate_file: Optional[str] = None
    base_url: Optional[str] = None

    def environment(self) -> ApiEnvironment:
        """
        Resolve the gateway environment, honouring a custom base URL or
        certificate file when one is configured.
        """
        if self.certificate_file is None and self.base_url is None:
            return self.environment_name

        url = self.base_url or self.environment_name.base_url()
        if self.certificate_file is None:
            return _RelocatedEnvironment(url=url, source=self.environment_name)
        try:
            certificate = Path(self.certificate_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"Unable to read MPESA_CERTIFICATE_FILE '{self.certificate_file}': {exc}"
            ) from exc
        return CustomEnvironment(url=url, certificate=certificate)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        consumer_key = _required(values, "MPESA_CONSUMER_KEY")
        consumer_secret = _required(values, "MPESA_CONSUMER_SECRET")

        environment_raw = values.get("MPESA_ENVIRONMENT", "sandbox")
        try:
            environment_name = Environment.from_name(environment_raw)
        except ValueError as exc:
            raise ConfigError(f"MPESA_ENVIRONMENT: {exc}") from exc

        timeout_raw = values.get("MPESA_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout_seconds = float(timeout_raw)
        except ValueError as exc:
            raise ConfigError(
                f"MPESA_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'"
            ) from exc
        if timeout_seconds <= 0:
            raise ConfigError("MPESA_TIMEOUT_SECONDS must be greater than zero")

        crypto_backend = values.get("MPESA_CRYPTO_BACKEND", DEFAULT_BACKEND).strip().lower()
        if crypto_backend not in BACKENDS:
            raise ConfigError(
                f"MPESA_CRYPTO_BACKEND must be one of {', '.join(BACKENDS)}, "
                f"got '{crypto_backend}'"
            )

        base_url = _optional(values, "MPESA_BASE_URL")
        if base_url is not None:
            base_url = base_url.rstrip("/")
            if not base_url.startswith(("http://", "https://")):
                raise ConfigError("MPESA_BASE_URL must be an http(s) URL")

        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            environment_name=environment_name,
            initiator_password=_optional(values, "MPESA_INITIATOR_PASSWORD"),
            timeout_seconds=timeout_seconds,
            crypto_backend=crypto_backend,
            certificate_file=_optional(values, "MPESA_CERTIFICATE_FILE"),
            base_url=base_url,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        environment: Optional[str | Environment] = None,
        initiator_password: Optional[str] = None,
        timeout_seconds: Optional[float | int | str] = None,
        crypto_backend: Optional[str] = None,
        certificate_file: Optional[str | Path] = None,
        base_url: Optional[str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "consumer_key": consumer_key,
                "consumer_secret": consumer_secret,
                "environment": environment,
                "initiator_password": initiator_password,
                "timeout_seconds": timeout_seconds,
                "crypto_backend": crypto_backend,
                "certificate_file": certificate_file,
                "base_url": base_url,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        settings = build_settings(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(settings.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    consumer_key: Optional[str] = None,
    consumer_secret: Optional[str] = None,
    environment: Optional[str | Environment] = None,
    initiator_password: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
    crypto_backend: Optional[str] = None,
    certificate_file: Optional[str | Path] = None,
    base_url: Optional[str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can come from environment variables, a ``.env`` file,
    direct keyword arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
        environment=environment,
        initiator_password=initiator_password,
        timeout_seconds=timeout_seconds,
        crypto_backend=crypto_backend,
        certificate_file=certificate_file,
        base_url=base_url,
    )
