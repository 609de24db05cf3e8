"""Account service.

Classifies a fetched account into one ParsedAccount variant by its owner
program and data shape.
"""

from typing import Optional, Union

from solana_explorer.config import ProgramIds, SolanaConfig
from solana_explorer.layouts.token import (
    ACCOUNT_LEN,
    MINT_LEN,
    MintState,
    Token22Account,
    Token22Mint,
    TokenAccountState,
    unpack_account,
    unpack_account_with_extensions,
    unpack_mint,
    unpack_mint_with_extensions,
)
from solana_explorer.models.account import (
    OtherAccount,
    ParsedAccount,
    RawAccount,
    Token22MintAccount,
    Token22TokenAccount,
    TokenkegMintAccount,
    TokenkegTokenAccount,
)
from solana_explorer.services.base_service import BaseService
from solana_explorer.services.system_service import SystemAccountService
from solana_explorer.services.token_service import TokenService
from solana_explorer.solana_client import SolanaClient
from solana_explorer.utils.errors import MalformedDataError, NotFoundError
from solana_explorer.utils.validation import require_public_key

DecodedTokenProgramAccount = Union[TokenAccountState, MintState, Token22Account, Token22Mint]


def decode_token_program_account(
    owner: str,
    data: bytes,
    program_ids: ProgramIds,
) -> Optional[DecodedTokenProgramAccount]:
    """Decode account data owned by one of the token programs.

    A token account layout is tried before the mint layout. Data that fits
    neither, or an owner that is not a token program, gives None.
    """
    if owner == program_ids.tokenkeg:
        if len(data) == ACCOUNT_LEN:
            try:
                return unpack_account(data)
            except MalformedDataError:
                pass
        if len(data) == MINT_LEN:
            try:
                return unpack_mint(data)
            except MalformedDataError:
                pass
        return None

    if owner == program_ids.token22:
        try:
            return unpack_account_with_extensions(data)
        except MalformedDataError:
            pass
        try:
            return unpack_mint_with_extensions(data)
        except MalformedDataError:
            return None

    return None


class AccountService(BaseService):
    """Service for inspecting arbitrary accounts."""

    def __init__(
        self,
        client: SolanaClient,
        config: Optional[SolanaConfig] = None,
        token_service: Optional[TokenService] = None,
        system_service: Optional[SystemAccountService] = None,
    ):
        super().__init__(client, config)
        self.token_service = token_service or TokenService(client, self.config)
        self.system_service = system_service or SystemAccountService(
            client, self.config, token_service=self.token_service
        )

    async def inspect(self, address: str) -> ParsedAccount:
        """Fetch and classify an account.

        Raises:
            InvalidPublicKeyError: If the address is not a public key
            NotFoundError: If the account does not exist
        """
        require_public_key(address)
        async with self.log_timing(f"getAccountInfo {address}"):
            raw = await self.client.get_account(address)
        if raw is None:
            raise NotFoundError(f"Account not found: {address}", "account", address)
        return await self.classify(raw, address)

    async def classify(self, raw: RawAccount, key: str) -> ParsedAccount:
        """Classify a fetched account.

        Token accounts trigger a fetch of their mint; failing to fetch or
        decode that mint is an error.

        Raises:
            NotFoundError: If a token account's mint does not exist
            MalformedDataError: If a token account's mint cannot be decoded
        """
        if raw.owner == self.program_ids.system:
            return await self.system_service.aggregate(key, raw)

        decoded = decode_token_program_account(raw.owner, raw.data, self.program_ids)

        if isinstance(decoded, TokenAccountState):
            mint = unpack_mint(await self.client.get_account_data(decoded.mint))
            symbol = await self.token_service.resolve_symbol(decoded.mint, mint_state=mint)
            return TokenkegTokenAccount(key=key, token_account=decoded, mint_account=mint, symbol=symbol)

        if isinstance(decoded, Token22Account):
            mint22 = unpack_mint_with_extensions(await self.client.get_account_data(decoded.base.mint))
            symbol = await self.token_service.resolve_symbol(decoded.base.mint, mint_state=mint22)
            return Token22TokenAccount(key=key, token_account=decoded, mint_account=mint22, symbol=symbol)

        if isinstance(decoded, MintState):
            return TokenkegMintAccount(key=key, mint=decoded)

        if isinstance(decoded, Token22Mint):
            return Token22MintAccount(key=key, mint=decoded)

        self.logger.debug(f"Account {key} owned by {raw.owner} is not decoded")
        return OtherAccount.from_raw(key, raw)
