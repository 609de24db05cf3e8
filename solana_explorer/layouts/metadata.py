"""Metaplex token metadata records."""

from dataclasses import dataclass
from typing import Tuple

from solders.pubkey import Pubkey

from solana_explorer.constants import METADATA_PROGRAM_ID
from solana_explorer.utils.errors import MalformedDataError

# Account key of a Metaplex MetadataV1 record
METADATA_V1_KEY = 4

# key (1) + update authority (32) + mint (32)
DATA_STRUCT_OFFSET = 65


@dataclass(frozen=True)
class MetaplexMetadata:
    """Leading fields of a Metaplex metadata account."""

    update_authority: str
    mint: str
    name: str
    symbol: str
    uri: str


def derive_metadata_address(mint: str, program_id: str = METADATA_PROGRAM_ID) -> str:
    """Derive the metadata PDA for a mint.

    Seeds are ``["metadata", program_id, mint]`` under the metadata program.

    Raises:
        ValueError: If either key is not a valid public key
    """
    program = Pubkey.from_string(program_id)
    seeds = [b"metadata", bytes(program), bytes(Pubkey.from_string(mint))]
    metadata_pda, _ = Pubkey.find_program_address(seeds, program)
    return str(metadata_pda)


def _read_string(data: bytes, offset: int) -> Tuple[str, int]:
    if len(data) < offset + 4:
        raise MalformedDataError("Metadata string length out of bounds", data_type="metaplex_metadata")
    length = int.from_bytes(data[offset:offset + 4], "little")
    start = offset + 4
    end = start + length
    if len(data) < end:
        raise MalformedDataError("Metadata string overruns account data", data_type="metaplex_metadata")
    try:
        return data[start:end].decode("utf-8").rstrip("\x00"), end
    except UnicodeDecodeError as e:
        raise MalformedDataError(f"Metadata string is not valid UTF-8: {e}", data_type="metaplex_metadata")


def unpack_metadata(data: bytes) -> MetaplexMetadata:
    """Decode the name, symbol and uri of a Metaplex metadata account.

    The on-chain strings are padded with NUL bytes to a fixed width; the
    padding is stripped.

    Raises:
        MalformedDataError: If the record is not a MetadataV1 account
    """
    if len(data) < DATA_STRUCT_OFFSET:
        raise MalformedDataError(
            f"Metadata account too short: {len(data)} bytes", data_type="metaplex_metadata"
        )
    if data[0] != METADATA_V1_KEY:
        raise MalformedDataError(f"Unexpected metadata key {data[0]}", data_type="metaplex_metadata")

    name, offset = _read_string(data, DATA_STRUCT_OFFSET)
    symbol, offset = _read_string(data, offset)
    uri, _ = _read_string(data, offset)
    return MetaplexMetadata(
        update_authority=str(Pubkey(data[1:33])),
        mint=str(Pubkey(data[33:65])),
        name=name,
        symbol=symbol,
        uri=uri,
    )
