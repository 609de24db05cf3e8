"""Token metadata service.

Resolves the display symbol of a mint from Metaplex metadata or from the
Token-2022 inline metadata extension.
"""

from typing import Optional, Union

from solana_explorer.config import EXTENSION_SYMBOL_SOURCE, METAPLEX_SYMBOL_SOURCE
from solana_explorer.layouts.metadata import derive_metadata_address, unpack_metadata
from solana_explorer.layouts.token import (
    ExtensionType,
    MintState,
    Token22Mint,
    unpack_mint_with_extensions,
    unpack_token_metadata,
)
from solana_explorer.services.base_service import BaseService
from solana_explorer.utils.errors import ExplorerError


class TokenService(BaseService):
    """Service for token metadata lookups."""

    def derive_metadata_address(self, mint: str) -> str:
        """Metaplex metadata PDA of ``mint`` under the configured program."""
        return derive_metadata_address(mint, self.program_ids.metadata)

    async def resolve_symbol(
        self,
        mint: str,
        mint_state: Optional[Union[MintState, Token22Mint]] = None,
        fetch_mint: bool = False,
    ) -> Optional[str]:
        """Find the symbol of a mint.

        Sources are tried in ``config.symbol_sources`` order. A source that
        fails to fetch or decode is skipped, so this never raises.

        Args:
            mint: Mint address
            mint_state: Already decoded mint, used by the extension source
            fetch_mint: Fetch the mint for the extension source when
                ``mint_state`` is not supplied

        Returns:
            The symbol, or None when no source has one
        """
        for source in self.config.symbol_sources:
            try:
                if source == METAPLEX_SYMBOL_SOURCE:
                    symbol = await self._metaplex_symbol(mint)
                elif source == EXTENSION_SYMBOL_SOURCE:
                    symbol = await self._extension_symbol(mint, mint_state, fetch_mint)
                else:
                    self.logger.warning(f"Ignoring unknown symbol source {source}")
                    continue
            except (ExplorerError, ValueError) as e:
                self.logger.debug(f"Symbol source {source} failed for {mint}: {e}")
                continue

            if symbol:
                return symbol
        return None

    async def _metaplex_symbol(self, mint: str) -> Optional[str]:
        metadata_address = self.derive_metadata_address(mint)
        account = await self.client.get_account(metadata_address)
        if account is None:
            return None
        return unpack_metadata(account.data).symbol

    async def _extension_symbol(
        self,
        mint: str,
        mint_state: Optional[Union[MintState, Token22Mint]],
        fetch_mint: bool,
    ) -> Optional[str]:
        if mint_state is None and fetch_mint:
            account = await self.client.get_account(mint)
            if account is None or account.owner != self.program_ids.token22:
                return None
            mint_state = unpack_mint_with_extensions(account.data)

        if not isinstance(mint_state, Token22Mint):
            return None

        value = mint_state.get_extension_bytes(ExtensionType.TOKEN_METADATA)
        if value is None:
            return None
        return unpack_token_metadata(value).symbol
