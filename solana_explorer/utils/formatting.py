"""Formatting helpers shared by the display layer."""

from decimal import Decimal
from typing import Union

from solana_explorer.constants import LAMPORTS_PER_SOL, SOL_DECIMALS


def display_balance(amount: int, decimals: int) -> str:
    """Render a raw integer amount as a decimal string.

    The integer part is grouped with thousands separators and the fractional
    part always carries exactly ``decimals`` digits.

    >>> display_balance(1234567890, 9)
    '1.234567890'
    >>> display_balance(12_345_000_000, 6)
    '12,345.000000'
    """
    if decimals < 0:
        raise ValueError(f"decimals must not be negative: {decimals}")
    whole, fraction = divmod(int(amount), 10 ** decimals)
    if decimals == 0:
        return f"{whole:,}"
    return f"{whole:,}.{fraction:0{decimals}d}"


def display_sol(lamports: int) -> str:
    """Render lamports as SOL with all nine decimals."""
    return display_balance(lamports, SOL_DECIMALS)


def format_fee(fee_lamports: int) -> str:
    """Render a fee in SOL without trailing zeros, e.g. ``◎0.000005``."""
    sol = Decimal(int(fee_lamports)) / Decimal(LAMPORTS_PER_SOL)
    return f"◎{sol:f}"


def format_rewards(rewards: int, rewards_sub: int) -> str:
    """Render a whole/fractional SOL split, e.g. ``◎0.012345678``."""
    return f"◎{rewards}.{rewards_sub:09d}"


def format_integer(value: int) -> str:
    """Group an integer with thousands separators."""
    return f"{int(value):,}"


def format_version(version: Union[str, int]) -> str:
    """Render a transaction version tag as ``Legacy`` or its number."""
    if isinstance(version, str) and version.lower() == "legacy":
        return "Legacy"
    return str(version)
