"""Unit tests for BaseService.

This module tests the base service functionality.
"""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from solana_explorer.config import SolanaConfig
from solana_explorer.services.base_service import BaseService
from solana_explorer.solana_client import SolanaClient


class TestBaseService:
    """Test suite for BaseService."""

    @pytest.fixture
    def base_service(self):
        """Create a BaseService instance for testing."""
        return BaseService(AsyncMock(spec=SolanaClient), SolanaConfig(rpc_url="http://localhost:8899"))

    def test_program_ids_come_from_config(self, base_service):
        assert base_service.program_ids is base_service.config.program_ids

    @pytest.mark.asyncio
    async def test_gather_with_concurrency_keeps_order(self, base_service):
        """Test that results come back in submission order."""
        async def delayed(value, delay):
            await asyncio.sleep(delay)
            return value

        results = await base_service.gather_with_concurrency(
            2, delayed("a", 0.03), delayed("b", 0.01), delayed("c", 0)
        )

        assert results == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_gather_with_concurrency_propagates_errors(self, base_service):
        async def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await base_service.gather_with_concurrency(3, fail())

    @pytest.mark.asyncio
    async def test_log_timing(self, base_service, caplog):
        """Test that timing is logged on success and on failure."""
        with caplog.at_level(logging.DEBUG, logger=base_service.logger.name):
            async with base_service.log_timing("fast operation"):
                pass
            with pytest.raises(RuntimeError):
                with base_service.log_timing("failing operation"):
                    raise RuntimeError("nope")

        assert "fast operation completed" in caplog.text
        assert "failing operation failed" in caplog.text
