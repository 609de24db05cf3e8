"""
Token models for the Solana explorer.

This module defines the Pydantic model for token holdings listed under a
system account.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from solana_explorer.constants import SPL_TOKEN_PROGRAM_TAG
from solana_explorer.utils.errors import MalformedDataError


class TokenAccountBalance(BaseModel):
    """
    Model for a token account held by a wallet.

    ``balance`` is the decimal string reported by the node and ``program`` is
    ``"spl-token"`` for both token program generations.
    """
    key: str
    balance: str
    mint: str
    program: str = SPL_TOKEN_PROGRAM_TAG
    symbol: Optional[str] = None

    @classmethod
    def parse_keyed_account(cls, keyed_account: Dict[str, Any]) -> "TokenAccountBalance":
        """Build from one entry of a jsonParsed getTokenAccountsByOwner response.

        Raises:
            MalformedDataError: If the parsed token info is missing
        """
        try:
            info = keyed_account["account"]["data"]["parsed"]["info"]
            return cls(
                key=keyed_account["pubkey"],
                balance=info["tokenAmount"]["uiAmountString"],
                mint=info["mint"],
            )
        except (KeyError, TypeError) as e:
            raise MalformedDataError(
                f"Unexpected token account shape: missing {e}", data_type="token_account_balance"
            ) from e
