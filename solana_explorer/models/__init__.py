"""Data models for decoded accounts, transactions and blocks."""
