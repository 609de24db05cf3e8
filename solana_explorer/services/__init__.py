"""Inspection services built on top of the Solana client."""
