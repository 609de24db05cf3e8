"""Command-line entry point for the Solana explorer."""

import sys

from solana_explorer.cli import main as cli_main


def main():
    """Run the Solana explorer CLI."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
