"""
Error handling utilities for the Solana explorer.

This module defines the exception hierarchy raised by the RPC client, the
binary layout decoders and the inspection services.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for the Solana explorer."""

    # General errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Solana RPC errors
    RPC_ERROR = "RPC_ERROR"
    RPC_CONNECTION_ERROR = "RPC_CONNECTION_ERROR"

    # Data errors
    INVALID_ACCOUNT = "INVALID_ACCOUNT"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    DATA_PARSING_ERROR = "DATA_PARSING_ERROR"
    DATA_NOT_FOUND = "DATA_NOT_FOUND"


class ExplorerError(Exception):
    """Base exception for all Solana explorer errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize a new explorer error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the error to a dictionary.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ExplorerError):
    """Exception for validation errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR
    ):
        super().__init__(message=message, code=code, details=details)


class InvalidPublicKeyError(ValidationError):
    """Exception raised when an invalid public key is provided."""

    def __init__(self, pubkey: str):
        super().__init__(
            f"Invalid public key: {pubkey}",
            details={"pubkey": pubkey},
            code=ErrorCode.INVALID_ACCOUNT
        )
        self.pubkey = pubkey


class InvalidSignatureError(ValidationError):
    """Exception raised when an invalid transaction signature is provided."""

    def __init__(self, signature: str):
        super().__init__(
            f"Invalid transaction signature: {signature}",
            details={"signature": signature},
            code=ErrorCode.INVALID_SIGNATURE
        )
        self.signature = signature


class NotFoundError(ExplorerError):
    """Requested account, transaction or block is absent at the node."""

    def __init__(
        self,
        message: str,
        resource_type: str,
        resource_id: str
    ):
        super().__init__(
            message=message,
            code=ErrorCode.DATA_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MalformedDataError(ExplorerError):
    """Data does not match the expected layout or response shape."""

    def __init__(
        self,
        message: str,
        data_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if data_type:
            error_details["data_type"] = data_type

        super().__init__(
            message=message,
            code=ErrorCode.DATA_PARSING_ERROR,
            details=error_details
        )
        self.data_type = data_type


class RpcError(ExplorerError):
    """Exception for Solana RPC errors."""

    def __init__(
        self,
        message: str,
        rpc_error: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.RPC_ERROR
    ):
        super().__init__(
            message=message,
            code=code,
            details={"rpc_error": rpc_error or {}}
        )

    @property
    def rpc_error_code(self) -> Optional[int]:
        """JSON-RPC error code reported by the node, if any."""
        return self.details["rpc_error"].get("code")


class RpcConnectionError(RpcError):
    """Exception for Solana RPC connection errors."""

    def __init__(
        self,
        message: str,
        rpc_error: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            rpc_error=rpc_error,
            code=ErrorCode.RPC_CONNECTION_ERROR
        )
