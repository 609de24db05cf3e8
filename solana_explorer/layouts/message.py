"""Versioned transaction messages.

Transactions arrive from the node as ``[data, encoding]`` pairs. The wire bytes
are parsed with solders and copied into plain dataclasses so the rest of the
package never touches solders objects directly.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, List, Tuple, Union

import base58
from solders.message import MessageV0 as SoldersMessageV0
from solders.transaction import VersionedTransaction

from solana_explorer.utils.errors import MalformedDataError
from solana_explorer.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MessageHeader:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int


@dataclass(frozen=True)
class CompiledInstruction:
    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes


@dataclass(frozen=True)
class AddressTableLookup:
    account_key: str
    writable_indexes: Tuple[int, ...]
    readonly_indexes: Tuple[int, ...]


@dataclass(frozen=True)
class _MessageBase:
    header: MessageHeader
    account_keys: List[str]
    recent_blockhash: str
    instructions: List[CompiledInstruction]

    def is_signer(self, index: int) -> bool:
        """Whether the static key at ``index`` must sign."""
        return index < self.header.num_required_signatures

    def is_writable(self, index: int) -> bool:
        """Whether the static key at ``index`` is writable per the header ranges.

        Signed keys are writable unless they fall in the trailing read-only
        signed range; unsigned keys are writable unless they fall in the
        trailing read-only unsigned range.
        """
        header = self.header
        if index < header.num_required_signatures:
            return index < header.num_required_signatures - header.num_readonly_signed_accounts
        return index < len(self.account_keys) - header.num_readonly_unsigned_accounts

    def program_id(self, instruction: CompiledInstruction) -> str:
        """Static key invoked by ``instruction``.

        Raises:
            MalformedDataError: If the index is not a static key
        """
        if instruction.program_id_index >= len(self.account_keys):
            raise MalformedDataError(
                f"Program index {instruction.program_id_index} outside static keys",
                data_type="transaction_message",
            )
        return self.account_keys[instruction.program_id_index]


@dataclass(frozen=True)
class LegacyMessage(_MessageBase):
    """Message without lookup tables."""

    version = "legacy"


@dataclass(frozen=True)
class MessageV0(_MessageBase):
    """Version 0 message, which may reference address lookup tables."""

    address_table_lookups: List[AddressTableLookup] = field(default_factory=list)

    version = 0


VersionedMessage = Union[LegacyMessage, MessageV0]


@dataclass(frozen=True)
class DecodedTransaction:
    signatures: List[str]
    message: VersionedMessage


def _decode_payload(encoded: Any) -> bytes:
    if isinstance(encoded, (list, tuple)) and len(encoded) == 2:
        data, encoding = encoded
    elif isinstance(encoded, str):
        data, encoding = encoded, "base58"
    else:
        raise MalformedDataError(
            f"Unsupported transaction payload: {type(encoded).__name__}", data_type="transaction"
        )

    try:
        if encoding == "base64":
            return base64.b64decode(data, validate=True)
        if encoding == "base58":
            return base58.b58decode(data)
    except (binascii.Error, ValueError) as e:
        raise MalformedDataError(f"Invalid {encoding} transaction data: {e}", data_type="transaction") from e
    raise MalformedDataError(f"Unsupported transaction encoding: {encoding}", data_type="transaction")


def _convert_message(message: Any) -> VersionedMessage:
    header = MessageHeader(
        num_required_signatures=message.header.num_required_signatures,
        num_readonly_signed_accounts=message.header.num_readonly_signed_accounts,
        num_readonly_unsigned_accounts=message.header.num_readonly_unsigned_accounts,
    )
    account_keys = [str(key) for key in message.account_keys]
    instructions = [
        CompiledInstruction(
            program_id_index=ix.program_id_index,
            accounts=tuple(ix.accounts),
            data=bytes(ix.data),
        )
        for ix in message.instructions
    ]
    if isinstance(message, SoldersMessageV0):
        lookups = [
            AddressTableLookup(
                account_key=str(lookup.account_key),
                writable_indexes=tuple(lookup.writable_indexes),
                readonly_indexes=tuple(lookup.readonly_indexes),
            )
            for lookup in message.address_table_lookups
        ]
        return MessageV0(
            header=header,
            account_keys=account_keys,
            recent_blockhash=str(message.recent_blockhash),
            instructions=instructions,
            address_table_lookups=lookups,
        )
    return LegacyMessage(
        header=header,
        account_keys=account_keys,
        recent_blockhash=str(message.recent_blockhash),
        instructions=instructions,
    )


def decode_transaction(encoded: Any) -> DecodedTransaction:
    """Decode an encoded transaction as returned by getTransaction or getBlock.

    Args:
        encoded: ``[data, "base64"]`` / ``[data, "base58"]`` or a bare base58 string

    Raises:
        MalformedDataError: If the payload cannot be decoded
    """
    raw = _decode_payload(encoded)
    try:
        transaction = VersionedTransaction.from_bytes(raw)
    except Exception as e:
        logger.debug(f"Failed to parse transaction bytes: {e}")
        raise MalformedDataError(f"Could not parse transaction: {e}", data_type="transaction") from e
    return DecodedTransaction(
        signatures=[str(sig) for sig in transaction.signatures],
        message=_convert_message(transaction.message),
    )


def decode_message(encoded: Any) -> VersionedMessage:
    return decode_transaction(encoded).message


def program_ids(message: VersionedMessage) -> List[str]:
    """Static program key of every top-level instruction, in order."""
    return [message.program_id(ix) for ix in message.instructions]
