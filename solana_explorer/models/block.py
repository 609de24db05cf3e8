"""
Block models for the Solana explorer.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from solana_explorer.utils.errors import ExplorerError


@dataclass
class ParsedBlock:
    """Summary of one confirmed block."""

    slot: int
    parent_slot: int
    blockhash: str
    leader: str
    rewards: int
    rewards_sub: int
    vote_transactions: int
    nonvote_transactions: int
    compute_units: int
    program_invocations: Optional[Dict[str, int]] = None

    @property
    def total_transactions(self) -> int:
        return self.vote_transactions + self.nonvote_transactions

    def ranked_invocations(self) -> List[Tuple[str, int]]:
        """Program invocation counts, most invoked first.

        Ties keep first-seen order. Empty when the block was not aggregated
        in verbose mode.
        """
        if not self.program_invocations:
            return []
        return sorted(self.program_invocations.items(), key=lambda item: item[1], reverse=True)


@dataclass
class BlockScanResult:
    """Outcome for one slot of a block range scan."""

    slot: int
    block: Optional[ParsedBlock] = None
    error: Optional[ExplorerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
