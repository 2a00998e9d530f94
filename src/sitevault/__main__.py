"""Module entrypoint to run SiteVault via `python -m sitevault`."""

from sitevault.cli import main


def run() -> None:
    """Dispatch to the console script handler."""

    main()


if __name__ == "__main__":  # pragma: no cover
    run()
