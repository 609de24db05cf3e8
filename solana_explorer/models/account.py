"""
Account models for the Solana explorer.

Every fetched account is classified into exactly one ParsedAccount variant.
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from solana_explorer.layouts.token import (
    ExtensionTag,
    MintState,
    Token22Account,
    Token22Mint,
    TokenAccountState,
)
from solana_explorer.models.token import TokenAccountBalance
from solana_explorer.utils.errors import MalformedDataError
from solana_explorer.utils.formatting import display_balance


class TokenProgram(str, Enum):
    """Token program generation an account belongs to."""

    TOKENKEG = "tokenkeg"
    TOKEN22 = "token22"


@dataclass(frozen=True)
class RawAccount:
    """Account as stored by the node."""

    lamports: int
    data: bytes
    owner: str
    executable: bool
    rent_epoch: int

    @classmethod
    def from_rpc(cls, value: Dict[str, Any]) -> "RawAccount":
        """Build from the ``value`` of a base64 getAccountInfo response.

        Raises:
            MalformedDataError: If the response lacks fields or the data is not base64
        """
        try:
            data_field = value["data"]
            encoded = data_field[0] if isinstance(data_field, list) else data_field
            return cls(
                lamports=int(value["lamports"]),
                data=base64.b64decode(encoded),
                owner=value["owner"],
                executable=bool(value.get("executable", False)),
                rent_epoch=int(value.get("rentEpoch", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedDataError(f"Invalid account response: {e}", data_type="account") from e


@dataclass
class SystemAccount:
    """Wallet-style account with its token holdings."""

    key: str
    lamports: int
    token_accounts: List[TokenAccountBalance] = field(default_factory=list)


@dataclass
class TokenkegTokenAccount:
    key: str
    token_account: TokenAccountState
    mint_account: MintState
    symbol: Optional[str] = None

    program = TokenProgram.TOKENKEG

    @property
    def balance(self) -> str:
        return display_balance(self.token_account.amount, self.mint_account.decimals)


@dataclass
class Token22TokenAccount:
    key: str
    token_account: Token22Account
    mint_account: Token22Mint
    symbol: Optional[str] = None

    program = TokenProgram.TOKEN22

    @property
    def balance(self) -> str:
        return display_balance(self.token_account.base.amount, self.mint_account.base.decimals)

    @property
    def extensions(self) -> List[ExtensionTag]:
        return self.token_account.extensions


@dataclass
class TokenkegMintAccount:
    key: str
    mint: MintState

    program = TokenProgram.TOKENKEG

    @property
    def extensions(self) -> List[ExtensionTag]:
        return []


@dataclass
class Token22MintAccount:
    key: str
    mint: Token22Mint

    program = TokenProgram.TOKEN22

    @property
    def extensions(self) -> List[ExtensionTag]:
        return self.mint.extensions


@dataclass
class OtherAccount:
    """Account owned by a program this explorer does not decode."""

    key: str
    lamports: int
    owner: str
    executable: bool
    data: bytes

    @classmethod
    def from_raw(cls, key: str, raw: RawAccount) -> "OtherAccount":
        return cls(
            key=key,
            lamports=raw.lamports,
            owner=raw.owner,
            executable=raw.executable,
            data=raw.data,
        )


TokenProgramAccount = Union[
    TokenkegTokenAccount,
    TokenkegMintAccount,
    Token22TokenAccount,
    Token22MintAccount,
]

ParsedAccount = Union[SystemAccount, TokenProgramAccount, OtherAccount]
