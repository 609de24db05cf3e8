"""Address lookup table account layout.

Layout (all integers little endian)::

    0   u32  type discriminator (0 = uninitialized, 1 = lookup table)
    4   u64  deactivation slot
    12  u64  last extended slot
    20  u8   last extended slot start index
    21  u8   authority option tag
    22  [32] authority
    54  u16  padding
    56  ...  addresses, 32 bytes each
"""

import struct
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from solders.pubkey import Pubkey

from solana_explorer.utils.errors import MalformedDataError

LOOKUP_TABLE_META_SIZE = 56
LOOKUP_TABLE_DISCRIMINATOR = 1


@dataclass(frozen=True)
class AddressLookupTable:
    """Deserialized address lookup table."""

    deactivation_slot: int
    last_extended_slot: int
    last_extended_slot_start_index: int
    authority: Optional[str]
    addresses: List[str] = field(default_factory=list)

    @classmethod
    def deserialize(cls, data: bytes) -> "AddressLookupTable":
        """Decode a lookup table account's data.

        Raises:
            MalformedDataError: If the data is not an initialized lookup table
        """
        if len(data) < LOOKUP_TABLE_META_SIZE:
            raise MalformedDataError(
                f"Lookup table data too short: {len(data)} bytes", data_type="address_lookup_table"
            )
        (discriminator,) = struct.unpack_from("<I", data, 0)
        if discriminator != LOOKUP_TABLE_DISCRIMINATOR:
            raise MalformedDataError(
                f"Unexpected lookup table discriminator {discriminator}", data_type="address_lookup_table"
            )
        deactivation_slot, last_extended_slot, start_index, has_authority = struct.unpack_from(
            "<QQBB", data, 4
        )
        if has_authority > 1:
            raise MalformedDataError(
                f"Invalid authority option tag {has_authority}", data_type="address_lookup_table"
            )
        authority = str(Pubkey(data[22:54])) if has_authority else None

        raw_addresses = data[LOOKUP_TABLE_META_SIZE:]
        if len(raw_addresses) % 32:
            raise MalformedDataError(
                "Lookup table address area is not a multiple of 32 bytes",
                data_type="address_lookup_table",
            )
        addresses = [
            str(Pubkey(raw_addresses[i:i + 32])) for i in range(0, len(raw_addresses), 32)
        ]
        return cls(
            deactivation_slot=deactivation_slot,
            last_extended_slot=last_extended_slot,
            last_extended_slot_start_index=start_index,
            authority=authority,
            addresses=addresses,
        )

    def lookup(self, indexes: Sequence[int]) -> List[str]:
        """Resolve table indexes to addresses.

        Raises:
            MalformedDataError: If an index is outside the table
        """
        resolved = []
        for index in indexes:
            if index >= len(self.addresses):
                raise MalformedDataError(
                    f"Lookup index {index} out of range for table of {len(self.addresses)}",
                    data_type="address_lookup_table",
                )
            resolved.append(self.addresses[index])
        return resolved
