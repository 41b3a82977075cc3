"""Allow running hostini as a module: python -m hostini."""

from hostini.cli import cli

if __name__ == "__main__":
    cli()
