"""Unit tests for configuration loading."""

import pytest

from solana_explorer.config import (
    DEFAULT_SYMBOL_SOURCES,
    ProgramIds,
    SolanaConfig,
    commitment_validator,
    get_env_var,
    get_network,
    get_solana_config,
    int_validator,
    symbol_sources_validator,
    url_validator,
)
from solana_explorer.constants import NETWORK_URLS, TOKEN_2022_PROGRAM_ID


@pytest.fixture(autouse=True)
def clear_config_cache():
    get_solana_config.cache_clear()
    yield
    get_solana_config.cache_clear()


@pytest.mark.parametrize(
    "alias,network",
    [
        ("dev", "devnet"),
        ("d", "devnet"),
        ("testnet", "testnet"),
        ("t", "testnet"),
        ("main", "mainnet"),
        ("mainnet-beta", "mainnet"),
        ("local", "localnet"),
        ("localhost", "localnet"),
        ("l", "localnet"),
    ],
)
def test_get_network_aliases(alias, network):
    assert get_network(alias) == NETWORK_URLS[network]


def test_get_network_passes_urls_through():
    assert get_network("https://rpc.example.com") == "https://rpc.example.com"


def test_validators():
    assert int_validator("7") == 7
    with pytest.raises(ValueError):
        int_validator("-1")
    with pytest.raises(ValueError):
        int_validator("abc")
    assert commitment_validator("Finalized") == "finalized"
    with pytest.raises(ValueError):
        commitment_validator("eventually")
    assert url_validator("http://localhost:8899") == "http://localhost:8899"
    with pytest.raises(ValueError):
        url_validator("not a url")


def test_symbol_sources_validator():
    assert symbol_sources_validator("token_metadata_extension, metaplex") == (
        "token_metadata_extension",
        "metaplex",
    )
    with pytest.raises(ValueError):
        symbol_sources_validator("jupiter")
    with pytest.raises(ValueError):
        symbol_sources_validator(" , ")


def test_get_env_var(monkeypatch):
    monkeypatch.delenv("EXPLORER_TEST_VAR", raising=False)
    assert get_env_var("EXPLORER_TEST_VAR", "fallback") == "fallback"
    with pytest.raises(ValueError):
        get_env_var("EXPLORER_TEST_VAR", required=True)
    monkeypatch.setenv("EXPLORER_TEST_VAR", "x")
    with pytest.raises(ValueError):
        get_env_var("EXPLORER_TEST_VAR", validator=int_validator)


def test_get_solana_config_from_environment(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "dev")
    monkeypatch.setenv("SOLANA_COMMITMENT", "finalized")
    monkeypatch.setenv("SOLANA_MAX_CONCURRENT_METADATA", "4")
    monkeypatch.setenv("SOLANA_SYMBOL_SOURCES", "token_metadata_extension")

    config = get_solana_config()

    assert config.rpc_url == NETWORK_URLS["devnet"]
    assert config.commitment == "finalized"
    assert config.max_concurrent_metadata == 4
    assert config.symbol_sources == ("token_metadata_extension",)
    assert config.program_ids.token22 == TOKEN_2022_PROGRAM_ID


def test_config_defaults_and_validation():
    config = SolanaConfig()
    assert config.block_fetch_attempts == 5
    assert config.max_concurrent_metadata == 10
    assert config.symbol_sources == DEFAULT_SYMBOL_SOURCES
    assert config.program_ids == ProgramIds.default()

    with pytest.raises(ValueError):
        SolanaConfig(block_fetch_attempts=0)
    with pytest.raises(ValueError):
        SolanaConfig(max_concurrent_metadata=0)


def test_with_rpc_url_resolves_alias():
    config = SolanaConfig(max_retries=1).with_rpc_url("local")
    assert config.rpc_url == NETWORK_URLS["localnet"]
    assert config.max_retries == 1
