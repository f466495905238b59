"""
Main entry point for the globsync CLI.
"""

from globsync.cli import cli


def main() -> None:
    """Main function for the globsync CLI."""
    cli()


if __name__ == "__main__":
    main()
