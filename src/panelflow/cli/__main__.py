"""Main entry point for panelflow CLI when run as a module."""

from panelflow.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
