"""
Public, high-level helpers for building an M-Pesa client from configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

import requests

from .core.client import Mpesa
from .core.config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .core.crypto import get_encryptor
from .core.environment import Environment

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "create_client",
    "load_client_config",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
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
) -> Mpesa:
    """
    Construct an :class:`Mpesa` client.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from ``MPESA_*`` environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            consumer_key,
            consumer_secret,
            environment,
            initiator_password,
            timeout_seconds,
            crypto_backend,
            certificate_file,
            base_url,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
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

    return Mpesa(
        cfg.consumer_key,
        cfg.consumer_secret,
        cfg.environment(),
        session=session,
        encryptor=get_encryptor(cfg.crypto_backend),
        timeout_seconds=cfg.timeout_seconds,
        initiator_password=cfg.initiator_password,
    )
