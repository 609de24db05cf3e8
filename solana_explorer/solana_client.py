"""Async Solana JSON-RPC client for the explorer."""

# Standard library imports
import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

# Third-party library imports
import httpx

# Internal imports
from solana_explorer.config import SolanaConfig, get_solana_config
from solana_explorer.logging_config import get_logger
from solana_explorer.models.account import RawAccount
from solana_explorer.utils.errors import NotFoundError, RpcConnectionError, RpcError
from solana_explorer.utils.validation import require_public_key, require_transaction_signature

# Get logger
logger = get_logger(__name__)

# JSON-RPC code returned by public nodes when rate limiting
RATE_LIMIT_ERROR_CODE = -32005

RETRIABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class SolanaClient:
    """Read-only client for a Solana node."""

    def __init__(self, config: Optional[SolanaConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the Solana client.

        Args:
            config: Solana configuration. Defaults to environment-based config.
            transport: Optional httpx transport, used by tests to stub the node
        """
        self.config = config or get_solana_config()
        self.headers = {"Content-Type": "application/json"}
        self.initial_retry_delay = 1.0  # starting delay in seconds
        self.max_retry_delay = 10.0  # maximum delay in seconds
        self._transport = transport
        self._request_id = 0

        # Shared HTTP client, opened lazily or by __aenter__
        self._http_client: Optional[httpx.AsyncClient] = None

    def _ensure_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            )
        return self._http_client

    def _retry_delay(self, retry_count: int) -> float:
        return min(self.initial_retry_delay * (2 ** retry_count), self.max_retry_delay)

    async def _make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make a JSON-RPC request to the Solana node.

        HTTP 408/429/5xx responses, rate-limit errors and connection failures
        are retried with exponential backoff up to ``config.max_retries`` times.

        Args:
            method: The RPC method to call
            params: The parameters to pass to the method

        Returns:
            The ``result`` member of the JSON-RPC response

        Raises:
            RpcError: If the node returns an error
            RpcConnectionError: If the node cannot be reached after all retries
        """
        if params is None:
            params = []

        log_params = json.dumps(params)
        if len(log_params) > 200:
            log_params = log_params[:197] + "..."
        logger.debug(f"_make_request called: method={method}, params={log_params}")

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        http_client = self._ensure_http_client()
        max_retries = self.config.max_retries

        for retry_count in range(max_retries + 1):
            if retry_count > 0:
                logger.info(f"Retry attempt {retry_count}/{max_retries} for {method}")

            try:
                response = await http_client.post(
                    self.config.rpc_url,
                    headers=self.headers,
                    json=payload,
                )
            except httpx.TransportError as e:
                if retry_count < max_retries:
                    wait_time = self._retry_delay(retry_count)
                    logger.warning(f"Request failed, retrying in {wait_time}s: {str(e)}")
                    await asyncio.sleep(wait_time)
                    continue
                logger.error(f"Request failed after {retry_count + 1} attempts: {str(e)}")
                raise RpcConnectionError(f"Could not reach {self.config.rpc_url}: {e}") from e

            if response.status_code in RETRIABLE_STATUS_CODES and retry_count < max_retries:
                wait_time = self._retry_delay(retry_count)
                logger.warning(f"HTTP status {response.status_code}, retrying in {wait_time}s: {method}")
                await asyncio.sleep(wait_time)
                continue

            if response.status_code >= 400:
                raise RpcConnectionError(
                    f"HTTP {response.status_code} from {self.config.rpc_url} for {method}",
                    {"http_status": response.status_code},
                )

            try:
                result = response.json()
            except json.JSONDecodeError as e:
                raise RpcError(f"Invalid JSON from node for {method}: {e}") from e

            if "error" in result:
                error = result["error"]
                message = f"Solana RPC error: {error.get('message', 'Unknown error')}"
                if "data" in error:
                    message += f" - {json.dumps(error['data'])}"

                if error.get("code") == RATE_LIMIT_ERROR_CODE and retry_count < max_retries:
                    wait_time = self._retry_delay(retry_count)
                    logger.warning(f"Rate limited, retrying in {wait_time}s: {method}")
                    await asyncio.sleep(wait_time)
                    continue

                raise RpcError(message, error)

            return result.get("result")

        # Only reached when every attempt hit a retriable status
        raise RpcConnectionError(f"Max retries reached for {method}")

    async def get_account(self, address: str) -> Optional[RawAccount]:
        """Fetch an account with base64 encoded data.

        Args:
            address: The account public key

        Returns:
            The account, or None if it does not exist

        Raises:
            InvalidPublicKeyError: If the address is not a valid public key
        """
        require_public_key(address)
        result = await self._make_request(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self.config.commitment}],
        )
        value = result.get("value") if isinstance(result, dict) else None
        if value is None:
            return None
        return RawAccount.from_rpc(value)

    async def get_account_data(self, address: str) -> bytes:
        """Fetch the data bytes of an account.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.get_account(address)
        if account is None:
            raise NotFoundError(f"Account not found: {address}", "account", address)
        return account.data

    async def get_transaction(
        self,
        signature: str,
        encoding: str = "base64",
        max_supported_transaction_version: int = 0,
    ) -> Optional[Dict[str, Any]]:
        """Get a confirmed transaction.

        Args:
            signature: The transaction signature
            encoding: Encoding of the transaction payload
            max_supported_transaction_version: Highest message version to return

        Returns:
            The transaction envelope, or None if unknown to the node
        """
        require_transaction_signature(signature)
        return await self._make_request(
            "getTransaction",
            [
                signature,
                {
                    "encoding": encoding,
                    "maxSupportedTransactionVersion": max_supported_transaction_version,
                    "commitment": self.config.commitment,
                },
            ],
        )

    async def get_block(
        self,
        slot: int,
        encoding: str = "base64",
        transaction_details: str = "full",
        rewards: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """Get a confirmed block with full transactions and rewards.

        Args:
            slot: The slot number

        Returns:
            Block information, or None if the node returned no block
        """
        return await self._make_request(
            "getBlock",
            [
                slot,
                {
                    "encoding": encoding,
                    "transactionDetails": transaction_details,
                    "rewards": rewards,
                    "maxSupportedTransactionVersion": 0,
                    "commitment": self.config.commitment,
                },
            ],
        )

    async def get_token_accounts_by_owner(self, owner: str, program_id: str) -> List[Dict[str, Any]]:
        """Get the jsonParsed token accounts of an owner under one token program.

        Args:
            owner: The owner public key
            program_id: Token program to list accounts for

        Returns:
            List of keyed accounts
        """
        require_public_key(owner)
        require_public_key(program_id)
        result = await self._make_request(
            "getTokenAccountsByOwner",
            [
                owner,
                {"programId": program_id},
                {"encoding": "jsonParsed", "commitment": self.config.commitment},
            ],
        )
        if isinstance(result, dict):
            return result.get("value") or []
        return result or []

    async def __aenter__(self):
        """Async context manager entry.

        Returns:
            Self
        """
        self._ensure_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


@asynccontextmanager
async def get_solana_client(config: Optional[SolanaConfig] = None):
    """Get a Solana client as an async context manager.

    Yields:
        SolanaClient: An initialized Solana client.
    """
    client = SolanaClient(config)
    try:
        yield client
    finally:
        # Ensure the client's resources are released
        await client.close()
