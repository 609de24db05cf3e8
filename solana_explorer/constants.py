"""Constants used throughout the Solana explorer.

This module defines well-known program ids and their display names.
"""

# Native programs
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
VOTE_PROGRAM_ID = "Vote111111111111111111111111111111111111111"
COMPUTE_BUDGET_PROGRAM_ID = "ComputeBudget111111111111111111111111111111"
ADDRESS_LOOKUP_TABLE_PROGRAM_ID = "AddressLookupTab1e1111111111111111111111111"

# Token programs
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"

# 1 SOL in lamports
LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9

# Program tag reported for token accounts of either token program generation
SPL_TOKEN_PROGRAM_TAG = "spl-token"

# Mapping of program IDs to human-readable names
PROGRAM_NAMES = {
    SYSTEM_PROGRAM_ID: "System Program",
    VOTE_PROGRAM_ID: "Vote Program",
    COMPUTE_BUDGET_PROGRAM_ID: "Compute Budget Program",
    ADDRESS_LOOKUP_TABLE_PROGRAM_ID: "Address Lookup Table Program",
    TOKEN_PROGRAM_ID: "Token Program",
    TOKEN_2022_PROGRAM_ID: "Token-2022 Program",
    ASSOCIATED_TOKEN_PROGRAM_ID: "Token Associated Program",
    METADATA_PROGRAM_ID: "Metaplex Metadata",
}

# Default endpoints for the network aliases accepted on the command line
NETWORK_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
    "localnet": "http://localhost:8899",
}

NETWORK_ALIASES = {
    "devnet": "devnet",
    "dev": "devnet",
    "d": "devnet",
    "testnet": "testnet",
    "test": "testnet",
    "t": "testnet",
    "mainnet": "mainnet",
    "main": "mainnet",
    "m": "mainnet",
    "mainnet-beta": "mainnet",
    "localnet": "localnet",
    "localhost": "localnet",
    "local": "localnet",
    "l": "localnet",
}
