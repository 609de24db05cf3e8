"""Common test fixtures for the Solana explorer tests.

This module provides fixtures and byte-level builders for accounts and
transactions that can be reused across different test modules.
"""

import base64
import struct
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from unittest.mock import AsyncMock

import pytest
from solders.pubkey import Pubkey

from solana_explorer.config import SolanaConfig
from solana_explorer.models.account import RawAccount
from solana_explorer.services.account_service import AccountService
from solana_explorer.services.block_service import BlockService
from solana_explorer.services.system_service import SystemAccountService
from solana_explorer.services.token_service import TokenService
from solana_explorer.services.transaction_service import TransactionService
from solana_explorer.solana_client import SolanaClient
from solana_explorer.utils.errors import NotFoundError

U64_MAX = 2 ** 64 - 1


def make_key(n: int) -> str:
    """Deterministic public key made of the byte ``n`` repeated."""
    return str(Pubkey(bytes([n]) * 32))


def key_bytes(key: str) -> bytes:
    return bytes(Pubkey.from_string(key))


def coption_key(key: Optional[str]) -> bytes:
    if key is None:
        return bytes(36)
    return struct.pack("<I", 1) + key_bytes(key)


def borsh_string(value: str, pad_to: int = 0) -> bytes:
    raw = value.encode("utf-8")
    raw += b"\x00" * max(0, pad_to - len(raw))
    return struct.pack("<I", len(raw)) + raw


# Token program layouts

def token_account_data(
    mint: str,
    owner: str,
    amount: int,
    state: int = 1,
    delegate: Optional[str] = None,
    is_native: Optional[int] = None,
    delegated_amount: int = 0,
    close_authority: Optional[str] = None,
) -> bytes:
    data = key_bytes(mint) + key_bytes(owner) + struct.pack("<Q", amount)
    data += coption_key(delegate)
    data += bytes([state])
    data += struct.pack("<IQ", 1, is_native) if is_native is not None else bytes(12)
    data += struct.pack("<Q", delegated_amount)
    data += coption_key(close_authority)
    assert len(data) == 165
    return data


def mint_data(
    decimals: int,
    supply: int = 0,
    mint_authority: Optional[str] = None,
    freeze_authority: Optional[str] = None,
    is_initialized: int = 1,
) -> bytes:
    data = coption_key(mint_authority)
    data += struct.pack("<QBB", supply, decimals, is_initialized)
    data += coption_key(freeze_authority)
    assert len(data) == 82
    return data


def tlv(entries: Iterable[Tuple[int, bytes]]) -> bytes:
    return b"".join(struct.pack("<HH", tag, len(value)) + value for tag, value in entries)


def token22_mint_data(base: bytes, entries: Sequence[Tuple[int, bytes]]) -> bytes:
    return base + bytes(165 - len(base)) + bytes([1]) + tlv(entries)


def token22_account_data(base: bytes, entries: Sequence[Tuple[int, bytes]]) -> bytes:
    return base + bytes([2]) + tlv(entries)


def token_metadata_value(
    mint: str,
    symbol: str,
    name: str = "Test Token",
    uri: str = "https://example.com/token.json",
    update_authority: Optional[str] = None,
) -> bytes:
    data = key_bytes(update_authority) if update_authority else bytes(32)
    data += key_bytes(mint)
    data += borsh_string(name) + borsh_string(symbol) + borsh_string(uri)
    data += struct.pack("<I", 0)  # additional metadata
    return data


def metaplex_metadata_data(mint: str, symbol: str, name: str = "Test Token", update_authority: Optional[str] = None) -> bytes:
    data = bytes([4])
    data += key_bytes(update_authority or make_key(250))
    data += key_bytes(mint)
    data += borsh_string(name, pad_to=32)
    data += borsh_string(symbol, pad_to=10)
    data += borsh_string("https://example.com/meta.json", pad_to=200)
    data += bytes([0, 0])  # seller fee basis points
    return data


def lookup_table_data(addresses: Sequence[str], authority: Optional[str] = None) -> bytes:
    data = struct.pack("<IQQBB", 1, U64_MAX, 0, 0, 1 if authority else 0)
    data += key_bytes(authority) if authority else bytes(32)
    data += bytes(2)
    assert len(data) == 56
    return data + b"".join(key_bytes(address) for address in addresses)


# Transactions

def shortvec(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def serialize_transaction(
    header: Tuple[int, int, int],
    account_keys: Sequence[str],
    instructions: Sequence[Tuple[int, Sequence[int], bytes]],
    lookups: Optional[Sequence[Tuple[str, Sequence[int], Sequence[int]]]] = None,
    recent_blockhash: Optional[str] = None,
) -> bytes:
    """Wire bytes of a transaction; ``lookups`` not None makes a V0 message."""
    num_signatures = header[0]
    out = shortvec(num_signatures) + bytes(64) * num_signatures

    message = b""
    if lookups is not None:
        message += bytes([0x80])
    message += bytes(header)
    message += shortvec(len(account_keys)) + b"".join(key_bytes(key) for key in account_keys)
    message += key_bytes(recent_blockhash or make_key(200))
    message += shortvec(len(instructions))
    for program_index, accounts, data in instructions:
        message += bytes([program_index])
        message += shortvec(len(accounts)) + bytes(accounts)
        message += shortvec(len(data)) + data
    if lookups is not None:
        message += shortvec(len(lookups))
        for table_key, writable, readonly in lookups:
            message += key_bytes(table_key)
            message += shortvec(len(writable)) + bytes(writable)
            message += shortvec(len(readonly)) + bytes(readonly)
    return out + message


def encode_transaction(raw: bytes) -> List[str]:
    return [base64.b64encode(raw).decode("ascii"), "base64"]


def transaction_envelope(
    raw: bytes,
    version=0,
    fee: int = 5000,
    compute_units: Optional[int] = 1500,
    slot: int = 12345,
    block_time: Optional[int] = 1628000000,
    err=None,
) -> Dict:
    meta = {
        "err": err,
        "fee": fee,
        "preBalances": [],
        "postBalances": [],
        "logMessages": ["Program log: ok"],
    }
    if compute_units is not None:
        meta["computeUnitsConsumed"] = compute_units
    return {
        "slot": slot,
        "blockTime": block_time,
        "version": version,
        "meta": meta,
        "transaction": encode_transaction(raw),
    }


def raw_account(owner: str, data: bytes = b"", lamports: int = 2_039_280, executable: bool = False) -> RawAccount:
    return RawAccount(lamports=lamports, data=data, owner=owner, executable=executable, rent_epoch=0)


def keyed_token_account(pubkey: str, mint: str, ui_amount: str, program: str = "spl-token") -> Dict:
    return {
        "pubkey": pubkey,
        "account": {
            "data": {
                "program": program,
                "parsed": {
                    "type": "account",
                    "info": {
                        "mint": mint,
                        "owner": make_key(1),
                        "tokenAmount": {"uiAmountString": ui_amount},
                    },
                },
            },
        },
    }


def install_accounts(client: AsyncMock, accounts: Dict[str, RawAccount]) -> None:
    """Serve ``accounts`` from the mocked client's account getters."""

    def get_account(address):
        return accounts.get(address)

    def get_account_data(address):
        if address not in accounts:
            raise NotFoundError(f"Account not found: {address}", "account", address)
        return accounts[address].data

    client.get_account.side_effect = get_account
    client.get_account_data.side_effect = get_account_data


@pytest.fixture
def explorer_config():
    """Configuration pointing at a local validator."""
    return SolanaConfig(rpc_url="http://localhost:8899")


@pytest.fixture
def mock_solana_client():
    """Create a mock Solana client with no accounts."""
    client = AsyncMock(spec=SolanaClient)
    install_accounts(client, {})
    client.get_token_accounts_by_owner.return_value = []
    client.get_transaction.return_value = None
    client.get_block.return_value = None
    return client


@pytest.fixture
def token_service(mock_solana_client, explorer_config):
    return TokenService(mock_solana_client, explorer_config)


@pytest.fixture
def system_service(mock_solana_client, explorer_config, token_service):
    return SystemAccountService(mock_solana_client, explorer_config, token_service=token_service)


@pytest.fixture
def account_service(mock_solana_client, explorer_config, token_service, system_service):
    return AccountService(
        mock_solana_client,
        explorer_config,
        token_service=token_service,
        system_service=system_service,
    )


@pytest.fixture
def transaction_service(mock_solana_client, explorer_config):
    return TransactionService(mock_solana_client, explorer_config)


@pytest.fixture
def block_service(mock_solana_client, explorer_config):
    return BlockService(mock_solana_client, explorer_config)
