"""
Base service class for the explorer services.

This module provides a base class for all services, with common functionality
for logging, timing and bounded concurrency.
"""

import logging
import time
from typing import Any, Awaitable, List, Optional

from solana_explorer.config import SolanaConfig, get_solana_config
from solana_explorer.solana_client import SolanaClient
from solana_explorer.utils.batching import gather_with_concurrency


class BaseService:
    """
    Base service class with common functionality.

    This class provides:
    - Access to the node client and configuration
    - Logging
    - Performance tracking
    """

    def __init__(
        self,
        client: SolanaClient,
        config: Optional[SolanaConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the base service.

        Args:
            client: Node client used for every fetch
            config: Explorer configuration, defaults to the environment config
            logger: Optional logger instance
        """
        self.client = client
        self.config = config or get_solana_config()
        self.program_ids = self.config.program_ids
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def gather_with_concurrency(
        self,
        concurrency_limit: int,
        *tasks: Awaitable[Any]
    ) -> List[Any]:
        """
        Execute tasks with a concurrency limit.

        Args:
            concurrency_limit: Maximum number of tasks to run concurrently
            tasks: Tasks to execute

        Returns:
            List of results from the tasks, in submission order
        """
        return await gather_with_concurrency(concurrency_limit, *tasks)

    def log_timing(self, operation_name: str) -> "TimingContextManager":
        """
        Create a context manager to log timing information.

        Args:
            operation_name: Name of the operation

        Returns:
            Timing context manager
        """
        return TimingContextManager(operation_name, self.logger)


class TimingContextManager:
    """Context manager to log timing information."""

    def __init__(self, operation_name: str, logger: logging.Logger):
        self.operation_name = operation_name
        self.logger = logger
        self.start_time = 0.0

    def _report(self, exc_val) -> None:
        elapsed = time.time() - self.start_time
        if exc_val is not None:
            self.logger.debug(
                f"{self.operation_name} failed after {elapsed:.2f}s: {str(exc_val)}"
            )
        else:
            self.logger.debug(f"{self.operation_name} completed in {elapsed:.2f}s")

    async def __aenter__(self) -> "TimingContextManager":
        self.start_time = time.time()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self._report(exc_val)

    def __enter__(self) -> "TimingContextManager":
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._report(exc_val)
