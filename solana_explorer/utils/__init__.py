"""Utility helpers for the Solana explorer."""
