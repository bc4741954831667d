"""Tests for the mpesa-client command-line tool."""

from unittest.mock import MagicMock

import pytest

from mpesa_client import Mpesa
from mpesa_client import cli
from mpesa_client.core import crypto
from mpesa_client.core.errors import InvalidCertificate

CREDENTIALS = [
    "--set",
    "MPESA_CONSUMER_KEY=key",
    "--set",
    "MPESA_CONSUMER_SECRET=secret",
]


@pytest.fixture
def fake_client(monkeypatch) -> MagicMock:
    client = MagicMock(spec=Mpesa)
    client.base_url = "https://sandbox.safaricom.co.ke"
    monkeypatch.setattr(cli, "create_client", lambda config: client)
    return client


@pytest.fixture
def env_file(tmp_path) -> str:
    return str(tmp_path / "absent.env")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> None:
    for key in (
        "MPESA_CONSUMER_KEY",
        "MPESA_CONSUMER_SECRET",
        "MPESA_ENVIRONMENT",
        "MPESA_INITIATOR_PASSWORD",
        "MPESA_CRYPTO_BACKEND",
    ):
        monkeypatch.delenv(key, raising=False)


def test_connectivity_check_succeeds(fake_client, env_file) -> None:
    fake_client.is_connected.return_value = True

    assert cli.run_cli(["--env-file", env_file, *CREDENTIALS]) == 0
    fake_client.is_connected.assert_called_once()
    fake_client.security_credential.assert_not_called()


def test_connectivity_check_fails(fake_client, env_file) -> None:
    fake_client.is_connected.return_value = False

    assert cli.run_cli(["--env-file", env_file, *CREDENTIALS]) == 1


def test_prints_security_credential(fake_client, env_file, capsys) -> None:
    fake_client.security_credential.return_value = "ZW5jcnlwdGVk"

    exit_code = cli.run_cli(
        ["--env-file", env_file, "--security-credential", *CREDENTIALS]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "ZW5jcnlwdGVk"
    fake_client.is_connected.assert_not_called()


def test_warns_about_default_password_in_production(
    fake_client, env_file, caplog
) -> None:
    fake_client.uses_default_initiator_password.return_value = True
    fake_client.security_credential.return_value = "ZW5jcnlwdGVk"

    exit_code = cli.run_cli(
        [
            "--env-file",
            env_file,
            "--security-credential",
            "--set",
            "MPESA_ENVIRONMENT=production",
            *CREDENTIALS,
        ]
    )

    assert exit_code == 0
    assert "MPESA_INITIATOR_PASSWORD" in caplog.text


@pytest.mark.parametrize(
    "environment, uses_default",
    [("sandbox", True), ("production", False)],
)
def test_no_default_password_warning(
    fake_client, env_file, caplog, environment: str, uses_default: bool
) -> None:
    fake_client.uses_default_initiator_password.return_value = uses_default
    fake_client.security_credential.return_value = "ZW5jcnlwdGVk"

    cli.run_cli(
        [
            "--env-file",
            env_file,
            "--security-credential",
            "--set",
            f"MPESA_ENVIRONMENT={environment}",
            *CREDENTIALS,
        ]
    )

    assert "MPESA_INITIATOR_PASSWORD" not in caplog.text


def test_security_credential_failure(fake_client, env_file) -> None:
    fake_client.security_credential.side_effect = InvalidCertificate("no certificate")

    exit_code = cli.run_cli(
        ["--env-file", env_file, "--security-credential", *CREDENTIALS]
    )

    assert exit_code == 1


def test_missing_configuration(fake_client, env_file) -> None:
    assert cli.run_cli(["--env-file", env_file]) == 1
    fake_client.is_connected.assert_not_called()


def test_reads_env_file(fake_client, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("MPESA_CONSUMER_KEY=key\nMPESA_CONSUMER_SECRET=secret\n")
    fake_client.is_connected.return_value = True

    assert cli.run_cli(["--env-file", str(env_file)]) == 0


@pytest.mark.parametrize("override", ["NO_EQUALS", "=value"])
def test_rejects_malformed_override(override: str) -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--set", override])


def test_missing_crypto_backend_is_a_configuration_error(
    monkeypatch, env_file, caplog
) -> None:
    monkeypatch.setitem(crypto.BACKENDS, "pure", ".not_installed:PureRsaEncryptor")

    exit_code = cli.run_cli(
        [
            "--env-file",
            env_file,
            "--set",
            "MPESA_CRYPTO_BACKEND=pure",
            *CREDENTIALS,
        ]
    )

    assert exit_code == 1
    assert "mpesa-client[pure]" in caplog.text
