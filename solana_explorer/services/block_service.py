"""Block service.

Aggregates confirmed blocks into ParsedBlock summaries and scans slot ranges.
"""

from typing import Any, AsyncIterator, Dict, Optional

from solana_explorer.constants import LAMPORTS_PER_SOL
from solana_explorer.layouts.message import decode_message, program_ids
from solana_explorer.models.block import BlockScanResult, ParsedBlock
from solana_explorer.services.base_service import BaseService
from solana_explorer.utils.errors import ExplorerError, MalformedDataError, NotFoundError, ValidationError

FEE_REWARD_TYPE = "Fee"


class BlockService(BaseService):
    """Service for block inspection."""

    def aggregate_block(self, block: Dict[str, Any], slot: int, verbose: bool = False) -> ParsedBlock:
        """Summarize one block.

        A transaction is a vote when its only instruction invokes the vote
        program. In verbose mode every top-level instruction is counted
        against its program.

        Raises:
            MalformedDataError: If a transaction lacks meta or compute units,
                or the block has no fee reward
        """
        vote_transactions = 0
        nonvote_transactions = 0
        compute_units = 0
        program_invocations: Optional[Dict[str, int]] = {} if verbose else None

        for transaction in block.get("transactions") or []:
            message = decode_message(transaction.get("transaction"))
            programs = program_ids(message)

            if len(programs) == 1 and programs[0] == self.program_ids.vote:
                vote_transactions += 1
            else:
                nonvote_transactions += 1

            meta = transaction.get("meta")
            if meta is None:
                raise MalformedDataError(f"Transaction in slot {slot} has no meta", data_type="block")
            consumed = meta.get("computeUnitsConsumed")
            if consumed is None:
                raise MalformedDataError(
                    f"Transaction in slot {slot} has no compute units", data_type="block"
                )
            compute_units += consumed

            if program_invocations is not None:
                for program in programs:
                    program_invocations[program] = program_invocations.get(program, 0) + 1

        fee_reward = next(
            (reward for reward in block.get("rewards") or [] if reward.get("rewardType") == FEE_REWARD_TYPE),
            None,
        )
        if fee_reward is None:
            raise MalformedDataError(f"Block {slot} has no fee reward", data_type="block")

        try:
            rewards, rewards_sub = divmod(int(fee_reward["lamports"]), LAMPORTS_PER_SOL)
            return ParsedBlock(
                slot=slot,
                parent_slot=block["parentSlot"],
                blockhash=block["blockhash"],
                leader=fee_reward["pubkey"],
                rewards=rewards,
                rewards_sub=rewards_sub,
                vote_transactions=vote_transactions,
                nonvote_transactions=nonvote_transactions,
                compute_units=compute_units,
                program_invocations=program_invocations,
            )
        except KeyError as e:
            raise MalformedDataError(f"Block {slot} is missing {e}", data_type="block") from e

    async def fetch_block(self, slot: int) -> Dict[str, Any]:
        """Fetch a block, retrying up to ``config.block_fetch_attempts`` times.

        Raises:
            ExplorerError: The error of the last attempt
        """
        attempts = self.config.block_fetch_attempts
        last_error: Optional[ExplorerError] = None
        for attempt in range(1, attempts + 1):
            try:
                block = await self.client.get_block(slot)
                if block is None:
                    raise NotFoundError(f"Block not available for slot {slot}", "block", str(slot))
                return block
            except ExplorerError as e:
                last_error = e
                self.logger.warning(f"Fetching block {slot} failed (attempt {attempt}/{attempts}): {e}")
        raise last_error

    async def inspect(self, slot: int, verbose: bool = False) -> ParsedBlock:
        """Fetch and aggregate a single block."""
        async with self.log_timing(f"getBlock {slot}"):
            block = await self.fetch_block(slot)
        return self.aggregate_block(block, slot, verbose)

    async def scan(
        self,
        start: int,
        end: Optional[int] = None,
        verbose: bool = False,
    ) -> AsyncIterator[BlockScanResult]:
        """Yield one result per slot of the inclusive range ``start..end``.

        A slot whose block cannot be fetched or aggregated yields a result
        carrying the error and the scan moves on.

        Raises:
            ValidationError: If ``end`` is before ``start``
        """
        if end is None:
            end = start
        if end < start:
            raise ValidationError(
                f"End slot {end} is before start slot {start}",
                details={"start": start, "end": end},
            )

        for slot in range(start, end + 1):
            try:
                parsed = await self.inspect(slot, verbose)
            except ExplorerError as e:
                yield BlockScanResult(slot=slot, error=e)
                continue
            yield BlockScanResult(slot=slot, block=parsed)
