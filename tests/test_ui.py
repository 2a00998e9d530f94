"""Tests for terminal output helpers."""

import os
from unittest.mock import MagicMock, patch

import pytest

from sitevault import ui
from sitevault.models import PlaintextCredential


def test_store_table_lists_usernames(populated_store):
    with ui.console.capture() as capture:
        ui.show_store_table(populated_store)
    output = capture.get()
    assert "alice@example.com" in output
    assert "octocat" in output
    assert "p@ss1" not in output
    assert "Total: 3 credentials, 2 sites" in output


def test_store_table_empty(store):
    with ui.console.capture() as capture:
        ui.show_store_table(store)
    assert "No credentials stored" in capture.get()


def test_panel_masks_password():
    view = PlaintextCredential("alice@example.com", "p@ss1")
    with ui.console.capture() as capture:
        ui.show_credential_panel("example.com", "alice", view)
    output = capture.get()
    assert "alice@example.com" in output
    assert "p@ss1" not in output


def test_panel_shows_password_on_request():
    view = PlaintextCredential("alice@example.com", "p@ss1")
    with ui.console.capture() as capture:
        ui.show_credential_panel("example.com", "alice", view, show_password=True)
    assert "p@ss1" in capture.get()


def test_reveal_waits_then_hides():
    with patch("sitevault.ui._stdin_is_terminal", return_value=False), patch(
        "sitevault.ui.time.sleep"
    ) as sleep:
        with ui.console.capture() as capture:
            ui.reveal_password("p@ss1", 7)
    sleep.assert_called_once_with(7)
    assert "Password hidden" in capture.get()


def test_reveal_interrupted_early():
    with patch("sitevault.ui._stdin_is_terminal", return_value=False), patch(
        "sitevault.ui.time.sleep", side_effect=KeyboardInterrupt
    ):
        with ui.console.capture() as capture:
            ui.reveal_password("p@ss1", 7)
    assert "Password hidden" in capture.get()


@pytest.mark.skipif(os.name != "posix", reason="terminal key polling is POSIX only")
class TestWaitForKey:
    @pytest.fixture
    def terminal(self):
        import termios
        import tty

        stdin = MagicMock()
        stdin.fileno.return_value = 0
        with patch("sitevault.ui._stdin_is_terminal", return_value=True), patch(
            "sitevault.ui.sys.stdin", stdin
        ), patch.object(termios, "tcgetattr", return_value=["saved"]), patch.object(
            termios, "tcsetattr"
        ) as tcsetattr, patch.object(
            tty, "setcbreak"
        ) as setcbreak:
            yield setcbreak, tcsetattr

    def test_key_press_returns_early(self, terminal):
        setcbreak, tcsetattr = terminal
        with patch("sitevault.ui.select.select", return_value=([0], [], [])), patch(
            "sitevault.ui.os.read"
        ) as read, patch("sitevault.ui.time.sleep") as sleep:
            ui._wait_for_key(10)

        read.assert_called_once_with(0, 1)
        sleep.assert_not_called()
        setcbreak.assert_called_once_with(0)
        assert tcsetattr.call_args[0][2] == ["saved"]

    def test_timeout_without_key(self, terminal):
        _, tcsetattr = terminal
        with patch("sitevault.ui.select.select", return_value=([], [], [])) as sel, patch(
            "sitevault.ui.os.read"
        ) as read:
            ui._wait_for_key(3)

        assert sel.call_args[0][3] == 3
        read.assert_not_called()
        tcsetattr.assert_called_once()
