"""Binary layouts of the two token program generations.

Tokenkeg accounts are fixed-size records: 165 bytes for a token account and
82 bytes for a mint. Token-2022 keeps the same base records and may append
extensions:

- byte 165 holds the account type (1 = mint, 2 = token account)
- mints are zero padded from byte 82 up to byte 165
- from byte 166 the extensions follow as type-length-value entries
  (u16 type, u16 length, value)

Every ``unpack_*`` function raises MalformedDataError when the bytes do not
match the layout.
"""

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple, Union

from solders.pubkey import Pubkey

from solana_explorer.utils.errors import MalformedDataError

ACCOUNT_LEN = 165
MINT_LEN = 82
MULTISIG_LEN = 355
ACCOUNT_TYPE_OFFSET = ACCOUNT_LEN
TLV_START = ACCOUNT_LEN + 1
TLV_HEADER_LEN = 4


class AccountState(IntEnum):
    UNINITIALIZED = 0
    INITIALIZED = 1
    FROZEN = 2


class AccountType(IntEnum):
    UNINITIALIZED = 0
    MINT = 1
    ACCOUNT = 2


class ExtensionType(IntEnum):
    """Token-2022 extension tags."""

    UNINITIALIZED = 0
    TRANSFER_FEE_CONFIG = 1
    TRANSFER_FEE_AMOUNT = 2
    MINT_CLOSE_AUTHORITY = 3
    CONFIDENTIAL_TRANSFER_MINT = 4
    CONFIDENTIAL_TRANSFER_ACCOUNT = 5
    DEFAULT_ACCOUNT_STATE = 6
    IMMUTABLE_OWNER = 7
    MEMO_TRANSFER = 8
    NON_TRANSFERABLE = 9
    INTEREST_BEARING_CONFIG = 10
    CPI_GUARD = 11
    PERMANENT_DELEGATE = 12
    NON_TRANSFERABLE_ACCOUNT = 13
    TRANSFER_HOOK = 14
    TRANSFER_HOOK_ACCOUNT = 15
    CONFIDENTIAL_TRANSFER_FEE_CONFIG = 16
    CONFIDENTIAL_TRANSFER_FEE_AMOUNT = 17
    METADATA_POINTER = 18
    TOKEN_METADATA = 19
    GROUP_POINTER = 20
    TOKEN_GROUP = 21
    GROUP_MEMBER_POINTER = 22
    TOKEN_GROUP_MEMBER = 23

    @property
    def display_name(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


# Tags this decoder does not know are kept as plain integers
ExtensionTag = Union[ExtensionType, int]


@dataclass(frozen=True)
class TokenAccountState:
    """Decoded token account record."""

    mint: str
    owner: str
    amount: int
    delegate: Optional[str]
    state: AccountState
    is_native: Optional[int]
    delegated_amount: int
    close_authority: Optional[str]


@dataclass(frozen=True)
class MintState:
    """Decoded mint record."""

    mint_authority: Optional[str]
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Optional[str]


@dataclass(frozen=True)
class Token22Account:
    """Token-2022 token account with its raw extension area."""

    base: TokenAccountState
    extensions: List[ExtensionTag] = field(default_factory=list)
    tlv_data: bytes = b""


@dataclass(frozen=True)
class Token22Mint:
    """Token-2022 mint with its declared extensions."""

    base: MintState
    extensions: List[ExtensionTag] = field(default_factory=list)
    tlv_data: bytes = b""

    def get_extension_bytes(self, extension: ExtensionType) -> Optional[bytes]:
        """Return the value bytes of the first entry with the given tag."""
        for tag, value in iter_tlv_entries(self.tlv_data):
            if tag == extension:
                return value
        return None


def _pubkey(data: bytes, offset: int) -> str:
    return str(Pubkey(data[offset:offset + 32]))


def _coption_pubkey(data: bytes, offset: int) -> Optional[str]:
    (tag,) = struct.unpack_from("<I", data, offset)
    if tag == 0:
        return None
    if tag == 1:
        return _pubkey(data, offset + 4)
    raise MalformedDataError(f"Invalid COption tag {tag} at offset {offset}", data_type="token")


def _coption_u64(data: bytes, offset: int) -> Optional[int]:
    tag, value = struct.unpack_from("<IQ", data, offset)
    if tag == 0:
        return None
    if tag == 1:
        return value
    raise MalformedDataError(f"Invalid COption tag {tag} at offset {offset}", data_type="token")


def _unpack_account_base(data: bytes) -> TokenAccountState:
    (amount,) = struct.unpack_from("<Q", data, 64)
    state_byte = data[108]
    if state_byte > AccountState.FROZEN:
        raise MalformedDataError(f"Invalid token account state {state_byte}", data_type="token_account")
    state = AccountState(state_byte)
    if state == AccountState.UNINITIALIZED:
        raise MalformedDataError("Token account is not initialized", data_type="token_account")
    (delegated_amount,) = struct.unpack_from("<Q", data, 121)
    return TokenAccountState(
        mint=_pubkey(data, 0),
        owner=_pubkey(data, 32),
        amount=amount,
        delegate=_coption_pubkey(data, 72),
        state=state,
        is_native=_coption_u64(data, 109),
        delegated_amount=delegated_amount,
        close_authority=_coption_pubkey(data, 129),
    )


def _unpack_mint_base(data: bytes) -> MintState:
    supply, decimals, is_initialized = struct.unpack_from("<QBB", data, 36)
    if is_initialized > 1:
        raise MalformedDataError(f"Invalid mint initialized flag {is_initialized}", data_type="mint")
    if not is_initialized:
        raise MalformedDataError("Mint is not initialized", data_type="mint")
    return MintState(
        mint_authority=_coption_pubkey(data, 0),
        supply=supply,
        decimals=decimals,
        is_initialized=True,
        freeze_authority=_coption_pubkey(data, 46),
    )


def unpack_account(data: bytes) -> TokenAccountState:
    """Decode a Tokenkeg token account (exactly 165 bytes)."""
    if len(data) != ACCOUNT_LEN:
        raise MalformedDataError(
            f"Token account must be {ACCOUNT_LEN} bytes, got {len(data)}", data_type="token_account"
        )
    return _unpack_account_base(data)


def unpack_mint(data: bytes) -> MintState:
    """Decode a Tokenkeg mint (exactly 82 bytes)."""
    if len(data) != MINT_LEN:
        raise MalformedDataError(f"Mint must be {MINT_LEN} bytes, got {len(data)}", data_type="mint")
    return _unpack_mint_base(data)


def iter_tlv_entries(tlv_data: bytes):
    """Yield ``(tag, value)`` pairs from a Token-2022 extension area.

    Iteration stops at the first uninitialized tag or when fewer than four
    bytes remain.

    Raises:
        MalformedDataError: If an entry claims more bytes than are present
    """
    offset = 0
    while offset + TLV_HEADER_LEN <= len(tlv_data):
        tag_value, length = struct.unpack_from("<HH", tlv_data, offset)
        if tag_value == ExtensionType.UNINITIALIZED:
            return
        start = offset + TLV_HEADER_LEN
        end = start + length
        if end > len(tlv_data):
            raise MalformedDataError(
                f"Extension {tag_value} overruns account data ({end} > {len(tlv_data)})",
                data_type="token_extension",
            )
        try:
            tag: ExtensionTag = ExtensionType(tag_value)
        except ValueError:
            tag = tag_value
        yield tag, tlv_data[start:end]
        offset = end


def _extension_area(data: bytes, base_len: int, expected: AccountType) -> Tuple[bytes, bytes]:
    if len(data) < base_len or len(data) == MULTISIG_LEN:
        raise MalformedDataError(f"Invalid Token-2022 account length {len(data)}", data_type="token22")
    if len(data) == base_len:
        return data, b""
    if len(data) <= ACCOUNT_LEN:
        raise MalformedDataError(f"Invalid Token-2022 account length {len(data)}", data_type="token22")
    if any(data[base_len:ACCOUNT_TYPE_OFFSET]):
        raise MalformedDataError("Token-2022 padding is not zeroed", data_type="token22")
    account_type = data[ACCOUNT_TYPE_OFFSET]
    if account_type != expected:
        raise MalformedDataError(
            f"Expected account type {expected.name}, found {account_type}", data_type="token22"
        )
    return data[:base_len], data[TLV_START:]


def unpack_account_with_extensions(data: bytes) -> Token22Account:
    """Decode a Token-2022 token account and list its extensions."""
    base, tlv_data = _extension_area(data, ACCOUNT_LEN, AccountType.ACCOUNT)
    extensions = [tag for tag, _ in iter_tlv_entries(tlv_data)]
    return Token22Account(base=_unpack_account_base(base), extensions=extensions, tlv_data=tlv_data)


def unpack_mint_with_extensions(data: bytes) -> Token22Mint:
    """Decode a Token-2022 mint and list its extensions in declaration order."""
    base, tlv_data = _extension_area(data, MINT_LEN, AccountType.MINT)
    extensions = [tag for tag, _ in iter_tlv_entries(tlv_data)]
    return Token22Mint(base=_unpack_mint_base(base), extensions=extensions, tlv_data=tlv_data)


def _read_string(data: bytes, offset: int) -> Tuple[str, int]:
    if offset + 4 > len(data):
        raise MalformedDataError("String length prefix out of bounds", data_type="token_metadata")
    (length,) = struct.unpack_from("<I", data, offset)
    start = offset + 4
    end = start + length
    if end > len(data):
        raise MalformedDataError("String overruns data", data_type="token_metadata")
    try:
        return data[start:end].decode("utf-8"), end
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"String is not valid UTF-8: {e}", data_type="token_metadata")


@dataclass(frozen=True)
class TokenMetadataExtension:
    """Inline metadata carried by a Token-2022 mint."""

    update_authority: Optional[str]
    mint: str
    name: str
    symbol: str
    uri: str


def unpack_token_metadata(value: bytes) -> TokenMetadataExtension:
    """Decode the value of a TOKEN_METADATA extension entry."""
    if len(value) < 64:
        raise MalformedDataError("Token metadata extension is too short", data_type="token_metadata")
    update_authority = None if not any(value[:32]) else _pubkey(value, 0)
    mint = _pubkey(value, 32)
    name, offset = _read_string(value, 64)
    symbol, offset = _read_string(value, offset)
    uri, _ = _read_string(value, offset)
    return TokenMetadataExtension(
        update_authority=update_authority,
        mint=mint,
        name=name,
        symbol=symbol,
        uri=uri,
    )
