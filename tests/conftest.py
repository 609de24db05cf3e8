"""Test configuration for pytest.

This module imports fixtures that should be available to all tests.
"""

# Import fixtures
from tests.fixtures.common import (  # noqa
    explorer_config,
    mock_solana_client,
    token_service,
    system_service,
    account_service,
    transaction_service,
    block_service,
)
