"""Tests for __main__.py module."""

from unittest.mock import patch

import sitevault.__main__


def test_module_imports_main():
    from sitevault.cli import main as cli_main

    assert sitevault.__main__.main is cli_main


@patch("sitevault.__main__.main")
def test_run_dispatches_to_cli(mock_main):
    sitevault.__main__.run()
    mock_main.assert_called_once_with()
