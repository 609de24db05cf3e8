"""Solana command line explorer.

This package fetches raw accounts, transactions and blocks from a Solana RPC
node and decodes them into typed values that the display layer renders.
"""

__version__ = "0.4.3"
__author__ = "Solana Explorer Contributors"
__email__ = "dev@solana-explorer.invalid"
