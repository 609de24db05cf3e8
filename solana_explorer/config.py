"""Configuration module for the Solana explorer."""

# Standard library imports
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Optional, Tuple

# Third-party library imports
from dotenv import load_dotenv

# Internal imports
from solana_explorer.constants import (
    METADATA_PROGRAM_ID,
    NETWORK_ALIASES,
    NETWORK_URLS,
    SYSTEM_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    VOTE_PROGRAM_ID,
)

# Load environment variables from .env file
load_dotenv()

# Symbol sources understood by the token metadata resolver, in default order
METAPLEX_SYMBOL_SOURCE = "metaplex"
EXTENSION_SYMBOL_SOURCE = "token_metadata_extension"
DEFAULT_SYMBOL_SOURCES = (METAPLEX_SYMBOL_SOURCE, EXTENSION_SYMBOL_SOURCE)


def get_env_var(key: str, default: Any = None, required: bool = False,
                validator: Optional[Callable[[str], Any]] = None) -> Any:
    """Get and validate environment variable.

    Args:
        key: Environment variable name
        default: Default value if not present
        required: If True, raises ValueError when not found
        validator: Optional validation function

    Returns:
        The environment variable value or default

    Raises:
        ValueError: If required and not found, or fails validation
    """
    value = os.environ.get(key)

    if value is None:
        if required:
            raise ValueError(f"Required environment variable '{key}' not found")
        return default

    if validator:
        try:
            return validator(value)
        except Exception as e:
            raise ValueError(f"Invalid value for environment variable '{key}': {str(e)}")

    return value


def int_validator(value: str) -> int:
    """Validate and convert string to a non-negative integer.

    Raises:
        ValueError: If not a valid integer
    """
    try:
        result = int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid integer")
    if result < 0:
        raise ValueError(f"'{value}' must not be negative")
    return result


def url_validator(value: str) -> str:
    """Validate URL format.

    Args:
        value: URL to validate

    Returns:
        The validated URL

    Raises:
        ValueError: If not a valid URL format
    """
    url_pattern = re.compile(
        r'^(https?):\/\/'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    if not url_pattern.match(value):
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def commitment_validator(value: str) -> str:
    """Validate Solana commitment level.

    Raises:
        ValueError: If not a valid commitment level
    """
    valid_commitments = ("processed", "confirmed", "finalized")
    if value.lower() not in valid_commitments:
        raise ValueError(f"Commitment must be one of: {', '.join(valid_commitments)}")
    return value.lower()


def log_level_validator(value: str) -> str:
    """Validate log level.

    Raises:
        ValueError: If not a valid log level
    """
    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    upper_value = value.upper()
    if upper_value not in valid_levels:
        raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
    return upper_value


def symbol_sources_validator(value: str) -> Tuple[str, ...]:
    """Validate a comma separated list of token symbol sources.

    Raises:
        ValueError: If a source is unknown or the list is empty
    """
    sources = tuple(part.strip() for part in value.split(",") if part.strip())
    if not sources:
        raise ValueError("At least one symbol source is required")
    for source in sources:
        if source not in DEFAULT_SYMBOL_SOURCES:
            raise ValueError(
                f"Unknown symbol source '{source}', expected one of: {', '.join(DEFAULT_SYMBOL_SOURCES)}"
            )
    return sources


def get_network(network_str: str) -> str:
    """Resolve a network alias to its RPC endpoint.

    Unknown values are assumed to already be endpoint URLs and are returned
    unchanged.

    Args:
        network_str: Alias such as "dev", "main" or "local", or a URL

    Returns:
        RPC endpoint URL
    """
    network = NETWORK_ALIASES.get(network_str.strip().lower())
    if network is None:
        return network_str
    return NETWORK_URLS[network]


@dataclass(frozen=True)
class ProgramIds:
    """Program ids the decoders dispatch on.

    Resolved once at startup and handed to the services, so tests can swap in
    fake ids.
    """

    system: str = SYSTEM_PROGRAM_ID
    tokenkeg: str = TOKEN_PROGRAM_ID
    token22: str = TOKEN_2022_PROGRAM_ID
    metadata: str = METADATA_PROGRAM_ID
    vote: str = VOTE_PROGRAM_ID

    @classmethod
    def default(cls) -> "ProgramIds":
        return cls()


@dataclass
class SolanaConfig:
    """Configuration for Solana RPC connection and inspection behavior."""

    rpc_url: str = NETWORK_URLS["mainnet"]
    commitment: str = "confirmed"
    timeout: int = 30  # seconds
    max_retries: int = 3
    block_fetch_attempts: int = 5
    max_concurrent_metadata: int = 10
    symbol_sources: Tuple[str, ...] = DEFAULT_SYMBOL_SOURCES
    log_level: str = "WARNING"
    program_ids: ProgramIds = field(default_factory=ProgramIds.default)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.block_fetch_attempts < 1:
            raise ValueError(f"Invalid block_fetch_attempts: {self.block_fetch_attempts}")

        if self.max_concurrent_metadata < 1:
            raise ValueError(f"Invalid max_concurrent_metadata: {self.max_concurrent_metadata}")

    def with_rpc_url(self, rpc_url: str) -> "SolanaConfig":
        """Return a copy of this config pointing at another endpoint.

        Args:
            rpc_url: Endpoint URL or network alias
        """
        return SolanaConfig(
            rpc_url=get_network(rpc_url),
            commitment=self.commitment,
            timeout=self.timeout,
            max_retries=self.max_retries,
            block_fetch_attempts=self.block_fetch_attempts,
            max_concurrent_metadata=self.max_concurrent_metadata,
            symbol_sources=self.symbol_sources,
            log_level=self.log_level,
            program_ids=self.program_ids,
        )


@lru_cache()
def get_solana_config() -> SolanaConfig:
    """Get Solana configuration from environment variables.

    Uses cached values for efficiency.

    Returns:
        SolanaConfig instance

    Raises:
        ValueError: If environment variables fail validation
    """
    rpc_url = get_network(get_env_var("SOLANA_RPC_URL", NETWORK_URLS["mainnet"]))
    return SolanaConfig(
        rpc_url=url_validator(rpc_url),
        commitment=get_env_var("SOLANA_COMMITMENT", "confirmed",
                               validator=commitment_validator),
        timeout=get_env_var("SOLANA_TIMEOUT", 30, validator=int_validator),
        max_retries=get_env_var("SOLANA_MAX_RETRIES", 3, validator=int_validator),
        block_fetch_attempts=get_env_var("SOLANA_BLOCK_FETCH_ATTEMPTS", 5, validator=int_validator),
        max_concurrent_metadata=get_env_var("SOLANA_MAX_CONCURRENT_METADATA", 10,
                                            validator=int_validator),
        symbol_sources=get_env_var("SOLANA_SYMBOL_SOURCES", DEFAULT_SYMBOL_SOURCES,
                                   validator=symbol_sources_validator),
        log_level=get_env_var("LOG_LEVEL", "WARNING", validator=log_level_validator),
    )
