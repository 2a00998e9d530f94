"""Tests for the password prompt helpers.

Covers:
- master password input, from the environment or getpass
- confirmation when a password is newly set
- cancellation with Ctrl-C / Ctrl-D
"""

from unittest.mock import patch

import pytest

from sitevault.auth import (
    PasswordMismatchError,
    get_master_password,
    master_password_from_env,
    prompt_create_master_password,
    prompt_credential_password,
    prompt_new_master_password,
    prompt_unlock_store,
)
from sitevault.config import Config


@pytest.fixture(autouse=True)
def no_env_password(monkeypatch):
    monkeypatch.delenv(Config.MASTER_PASSWORD_ENV, raising=False)


@patch("getpass.getpass", side_effect=["Secret!"])
def test_get_master_password_basic(mock_gp):
    assert get_master_password() == "Secret!"


def test_get_master_password_from_env(monkeypatch):
    monkeypatch.setenv(Config.MASTER_PASSWORD_ENV, "from-env")
    with patch("getpass.getpass") as mock_gp:
        assert get_master_password(confirm=True) == "from-env"
    mock_gp.assert_not_called()
    assert master_password_from_env()


def test_empty_env_password_is_used(monkeypatch):
    monkeypatch.setenv(Config.MASTER_PASSWORD_ENV, "")
    assert get_master_password() == ""


@patch("getpass.getpass", side_effect=["Pass1", "Pass1"])
def test_prompt_create_master_password_ok(mock_gp):
    assert prompt_create_master_password() == "Pass1"


@patch("getpass.getpass", side_effect=["Pass1", "Other"])
def test_prompt_create_master_password_mismatch(mock_gp):
    with pytest.raises(PasswordMismatchError):
        prompt_create_master_password()


@patch("getpass.getpass", side_effect=KeyboardInterrupt)
def test_get_master_password_cancelled(mock_gp, capsys):
    with pytest.raises(KeyboardInterrupt):
        get_master_password()
    assert "Password prompt cancelled" in capsys.readouterr().err


@patch("getpass.getpass", return_value="OpenSesame")
def test_prompt_unlock_store(mock_gp):
    assert prompt_unlock_store() == "OpenSesame"
    assert mock_gp.call_count == 1


def test_new_master_password_ignores_env(monkeypatch):
    monkeypatch.setenv(Config.MASTER_PASSWORD_ENV, "current")
    with patch("getpass.getpass", side_effect=["next", "next"]):
        assert prompt_new_master_password() == "next"


@patch("getpass.getpass", side_effect=["pw", "pw"])
def test_prompt_credential_password_confirmed(mock_gp):
    assert prompt_credential_password() == "pw"
    assert mock_gp.call_count == 2


@patch("getpass.getpass", side_effect=EOFError)
def test_prompt_credential_password_eof(mock_gp):
    with pytest.raises(EOFError):
        prompt_credential_password(confirm=False)
