"""Binary layouts for on-chain accounts and transaction messages."""
