"""Transaction service.

Resolves the full account list of a confirmed transaction, expanding address
lookup tables for version 0 messages.
"""

from typing import Any, Dict, List

from solana_explorer.layouts.lookup_table import AddressLookupTable
from solana_explorer.layouts.message import AddressTableLookup, MessageV0, VersionedMessage, decode_message
from solana_explorer.models.transaction import ParsedTransaction, ResolvedAccountMeta, TransactionStatusMeta
from solana_explorer.services.base_service import BaseService
from solana_explorer.utils.errors import ExplorerError, MalformedDataError, NotFoundError
from solana_explorer.utils.validation import require_transaction_signature


def static_account_metas(message: VersionedMessage) -> List[ResolvedAccountMeta]:
    """Static keys of a message with signer and writable flags from its header."""
    return [
        ResolvedAccountMeta(
            pubkey=key,
            is_signer=message.is_signer(index),
            is_writable=message.is_writable(index),
        )
        for index, key in enumerate(message.account_keys)
    ]


class TransactionService(BaseService):
    """Service for working with Solana transactions."""

    async def inspect(self, signature: str) -> ParsedTransaction:
        """Fetch and resolve a transaction by signature.

        Raises:
            InvalidSignatureError: If the signature is malformed
            NotFoundError: If the node does not know the transaction
        """
        require_transaction_signature(signature)
        async with self.log_timing(f"getTransaction {signature}"):
            envelope = await self.client.get_transaction(signature)
        if envelope is None:
            raise NotFoundError(f"Transaction not found: {signature}", "transaction", signature)
        return await self.resolve(envelope)

    async def resolve(self, envelope: Dict[str, Any]) -> ParsedTransaction:
        """Resolve a getTransaction envelope.

        Lookup tables are fetched one after another. A table that cannot be
        fetched or decoded, or that lacks a referenced index, contributes no
        accounts and resolution continues with the next one.

        Raises:
            MalformedDataError: If meta, blockTime or version is missing, or
                the transaction cannot be decoded
        """
        for field_name in ("meta", "blockTime", "version", "transaction"):
            if envelope.get(field_name) is None:
                raise MalformedDataError(
                    f"Transaction response has no {field_name}", data_type="transaction"
                )

        message = decode_message(envelope["transaction"])
        accounts = static_account_metas(message)

        if isinstance(message, MessageV0):
            for lookup in message.address_table_lookups:
                accounts.extend(await self.expand_lookup(lookup))

        return ParsedTransaction(
            meta=TransactionStatusMeta.model_validate(envelope["meta"]),
            accounts=accounts,
            block_time=envelope["blockTime"],
            slot=envelope.get("slot", 0),
            recent_blockhash=message.recent_blockhash,
            version=envelope["version"],
        )

    async def expand_lookup(self, lookup: AddressTableLookup) -> List[ResolvedAccountMeta]:
        """Writable then read-only accounts loaded through one lookup.

        Returns an empty list when the table is unusable.
        """
        try:
            data = await self.client.get_account_data(lookup.account_key)
            table = AddressLookupTable.deserialize(data)
            writable = table.lookup(lookup.writable_indexes)
            readonly = table.lookup(lookup.readonly_indexes)
        except ExplorerError as e:
            self.logger.warning(f"Skipping lookup table {lookup.account_key}: {e}")
            return []

        return [
            ResolvedAccountMeta(pubkey=key, is_signer=False, is_writable=True) for key in writable
        ] + [
            ResolvedAccountMeta(pubkey=key, is_signer=False, is_writable=False) for key in readonly
        ]
