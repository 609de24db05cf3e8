"""
Transaction models for the Solana explorer.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ResolvedAccountMeta:
    """An account referenced by a transaction, static or loaded from a table."""

    pubkey: str
    is_signer: bool
    is_writable: bool


class TransactionStatusMeta(BaseModel):
    """Execution metadata reported alongside a confirmed transaction."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    err: Optional[Any] = None
    fee: int = 0
    pre_balances: List[int] = Field(default_factory=list, alias="preBalances")
    post_balances: List[int] = Field(default_factory=list, alias="postBalances")
    log_messages: Optional[List[str]] = Field(default=None, alias="logMessages")
    compute_units_consumed: Optional[int] = Field(default=None, alias="computeUnitsConsumed")

    @property
    def succeeded(self) -> bool:
        return self.err is None


@dataclass
class ParsedTransaction:
    meta: TransactionStatusMeta
    accounts: List[ResolvedAccountMeta] = field(default_factory=list)
    block_time: int = 0
    slot: int = 0
    recent_blockhash: str = ""
    version: Union[str, int] = "legacy"

    @property
    def compute_units_consumed(self) -> Optional[int]:
        return self.meta.compute_units_consumed
