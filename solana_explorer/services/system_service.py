"""System account service.

Lists the token holdings of a wallet under both token programs.
"""

from typing import List, Optional, Tuple

from solana_explorer.config import SolanaConfig
from solana_explorer.models.account import RawAccount, SystemAccount
from solana_explorer.models.token import TokenAccountBalance
from solana_explorer.services.base_service import BaseService
from solana_explorer.services.token_service import TokenService
from solana_explorer.solana_client import SolanaClient


def sort_token_balances(balances: List[TokenAccountBalance]) -> List[TokenAccountBalance]:
    """Symbol-bearing balances first, ordered by symbol; the rest keep their order."""
    return sorted(balances, key=lambda balance: (balance.symbol is None, balance.symbol or ""))


class SystemAccountService(BaseService):
    """Service for system-owned (wallet) accounts."""

    def __init__(
        self,
        client: SolanaClient,
        config: Optional[SolanaConfig] = None,
        token_service: Optional[TokenService] = None,
    ):
        super().__init__(client, config)
        self.token_service = token_service or TokenService(client, self.config)

    async def list_token_balances(self, owner: str) -> List[Tuple[TokenAccountBalance, bool]]:
        """Token accounts of ``owner``, Tokenkeg first, then Token-2022.

        Returns:
            Pairs of balance and whether the account belongs to Token-2022
        """
        balances = []
        for program_id in (self.program_ids.tokenkeg, self.program_ids.token22):
            async with self.log_timing(f"getTokenAccountsByOwner {owner} {program_id}"):
                keyed_accounts = await self.client.get_token_accounts_by_owner(owner, program_id)
            is_token22 = program_id == self.program_ids.token22
            for keyed_account in keyed_accounts:
                balances.append((TokenAccountBalance.parse_keyed_account(keyed_account), is_token22))
        return balances

    async def aggregate(self, key: str, raw: RawAccount) -> SystemAccount:
        """Build the SystemAccount view of a wallet.

        Symbols are looked up with at most ``config.max_concurrent_metadata``
        fetches in flight.
        """
        balances = await self.list_token_balances(key)
        self.logger.info(f"Found {len(balances)} token accounts for {key}")

        symbols = await self.gather_with_concurrency(
            self.config.max_concurrent_metadata,
            *(
                self.token_service.resolve_symbol(balance.mint, fetch_mint=is_token22)
                for balance, is_token22 in balances
            ),
        )
        token_accounts = [
            balance.model_copy(update={"symbol": symbol})
            for (balance, _), symbol in zip(balances, symbols)
        ]
        return SystemAccount(
            key=key,
            lamports=raw.lamports,
            token_accounts=sort_token_balances(token_accounts),
        )
