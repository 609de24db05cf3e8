"""Unit tests for AccountService."""

import pytest

from solana_explorer.config import ProgramIds
from solana_explorer.constants import SYSTEM_PROGRAM_ID, TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID
from solana_explorer.layouts.metadata import derive_metadata_address
from solana_explorer.layouts.token import ExtensionType, MintState, Token22Account, Token22Mint, TokenAccountState
from solana_explorer.models.account import (
    OtherAccount,
    SystemAccount,
    Token22MintAccount,
    Token22TokenAccount,
    TokenkegMintAccount,
    TokenkegTokenAccount,
    TokenProgram,
)
from solana_explorer.services.account_service import decode_token_program_account
from solana_explorer.utils.errors import InvalidPublicKeyError, MalformedDataError, NotFoundError
from tests.fixtures.common import (
    install_accounts,
    keyed_token_account,
    make_key,
    metaplex_metadata_data,
    mint_data,
    raw_account,
    token22_account_data,
    token22_mint_data,
    token_account_data,
    token_metadata_value,
)

ACCOUNT = make_key(60)
MINT = make_key(61)
OWNER = make_key(62)
PROGRAM_IDS = ProgramIds.default()


def test_decode_token_program_account_shapes():
    assert isinstance(
        decode_token_program_account(TOKEN_PROGRAM_ID, token_account_data(MINT, OWNER, 1), PROGRAM_IDS),
        TokenAccountState,
    )
    assert isinstance(decode_token_program_account(TOKEN_PROGRAM_ID, mint_data(6), PROGRAM_IDS), MintState)
    assert isinstance(
        decode_token_program_account(TOKEN_2022_PROGRAM_ID, token_account_data(MINT, OWNER, 1), PROGRAM_IDS),
        Token22Account,
    )
    assert isinstance(
        decode_token_program_account(
            TOKEN_2022_PROGRAM_ID,
            token22_mint_data(mint_data(6), [(ExtensionType.NON_TRANSFERABLE, b"")]),
            PROGRAM_IDS,
        ),
        Token22Mint,
    )


def test_decode_token_program_account_falls_through():
    assert decode_token_program_account(TOKEN_PROGRAM_ID, bytes(100), PROGRAM_IDS) is None
    assert decode_token_program_account(TOKEN_PROGRAM_ID, bytes(165), PROGRAM_IDS) is None
    assert decode_token_program_account(TOKEN_2022_PROGRAM_ID, bytes(10), PROGRAM_IDS) is None
    assert decode_token_program_account(make_key(99), mint_data(6), PROGRAM_IDS) is None


def test_decode_token_program_account_uses_injected_program_ids():
    fake_tokenkeg = make_key(98)
    program_ids = ProgramIds(tokenkeg=fake_tokenkeg)

    assert decode_token_program_account(TOKEN_PROGRAM_ID, mint_data(6), program_ids) is None
    assert isinstance(decode_token_program_account(fake_tokenkeg, mint_data(6), program_ids), MintState)


@pytest.mark.asyncio
async def test_classify_tokenkeg_token_account(account_service, mock_solana_client):
    """Test that a token account resolves its mint and symbol."""
    install_accounts(mock_solana_client, {
        MINT: raw_account(TOKEN_PROGRAM_ID, mint_data(6, supply=10 ** 12)),
        derive_metadata_address(MINT): raw_account(make_key(63), metaplex_metadata_data(MINT, "USDC")),
    })
    raw = raw_account(TOKEN_PROGRAM_ID, token_account_data(MINT, OWNER, 1_500_000))

    account = await account_service.classify(raw, ACCOUNT)

    assert isinstance(account, TokenkegTokenAccount)
    assert account.program == TokenProgram.TOKENKEG
    assert account.key == ACCOUNT
    assert account.symbol == "USDC"
    assert account.balance == "1.500000"
    assert account.mint_account.decimals == 6
    mock_solana_client.get_account_data.assert_called_once_with(MINT)


@pytest.mark.asyncio
async def test_classify_token_account_with_missing_mint(account_service, mock_solana_client):
    raw = raw_account(TOKEN_PROGRAM_ID, token_account_data(MINT, OWNER, 1))

    with pytest.raises(NotFoundError):
        await account_service.classify(raw, ACCOUNT)


@pytest.mark.asyncio
async def test_classify_token_account_with_undecodable_mint(account_service, mock_solana_client):
    install_accounts(mock_solana_client, {MINT: raw_account(TOKEN_PROGRAM_ID, bytes(40))})
    raw = raw_account(TOKEN_PROGRAM_ID, token_account_data(MINT, OWNER, 1))

    with pytest.raises(MalformedDataError):
        await account_service.classify(raw, ACCOUNT)


@pytest.mark.asyncio
async def test_classify_token22_token_account_uses_inline_metadata(account_service, mock_solana_client):
    """Test that a Token-2022 account takes its symbol from the mint's extension."""
    mint = token22_mint_data(
        mint_data(2),
        [(ExtensionType.TOKEN_METADATA, token_metadata_value(MINT, "T22"))],
    )
    install_accounts(mock_solana_client, {MINT: raw_account(TOKEN_2022_PROGRAM_ID, mint)})
    raw = raw_account(
        TOKEN_2022_PROGRAM_ID,
        token22_account_data(token_account_data(MINT, OWNER, 12345), [(ExtensionType.IMMUTABLE_OWNER, b"")]),
    )

    account = await account_service.classify(raw, ACCOUNT)

    assert isinstance(account, Token22TokenAccount)
    assert account.program == TokenProgram.TOKEN22
    assert account.symbol == "T22"
    assert account.balance == "123.45"
    assert account.extensions == [ExtensionType.IMMUTABLE_OWNER]


@pytest.mark.asyncio
async def test_classify_mints(account_service):
    tokenkeg = await account_service.classify(raw_account(TOKEN_PROGRAM_ID, mint_data(9)), MINT)
    token22 = await account_service.classify(
        raw_account(
            TOKEN_2022_PROGRAM_ID,
            token22_mint_data(mint_data(9), [(ExtensionType.MINT_CLOSE_AUTHORITY, bytes(32))]),
        ),
        MINT,
    )

    assert isinstance(tokenkeg, TokenkegMintAccount)
    assert tokenkeg.extensions == []
    assert isinstance(token22, Token22MintAccount)
    assert token22.extensions == [ExtensionType.MINT_CLOSE_AUTHORITY]


@pytest.mark.asyncio
async def test_classify_other_account(account_service, mock_solana_client):
    raw = raw_account(make_key(70), b"\x01\x02", lamports=99, executable=True)

    account = await account_service.classify(raw, ACCOUNT)

    assert account == OtherAccount(key=ACCOUNT, lamports=99, owner=make_key(70), executable=True, data=b"\x01\x02")
    mock_solana_client.get_account_data.assert_not_called()


@pytest.mark.asyncio
async def test_classify_unparseable_token_data_is_other(account_service):
    account = await account_service.classify(raw_account(TOKEN_PROGRAM_ID, bytes(100)), ACCOUNT)
    assert isinstance(account, OtherAccount)


@pytest.mark.asyncio
async def test_classify_system_account(account_service, mock_solana_client):
    mock_solana_client.get_token_accounts_by_owner.side_effect = [
        [keyed_token_account(make_key(80), MINT, "1.5")],
        [],
    ]

    account = await account_service.classify(raw_account(SYSTEM_PROGRAM_ID, lamports=5_000_000_000), OWNER)

    assert isinstance(account, SystemAccount)
    assert account.lamports == 5_000_000_000
    assert [ta.key for ta in account.token_accounts] == [make_key(80)]


@pytest.mark.asyncio
async def test_inspect_missing_account(account_service):
    with pytest.raises(NotFoundError):
        await account_service.inspect(ACCOUNT)


@pytest.mark.asyncio
async def test_inspect_rejects_invalid_key(account_service, mock_solana_client):
    with pytest.raises(InvalidPublicKeyError):
        await account_service.inspect("not-a-key")
    mock_solana_client.get_account.assert_not_called()
