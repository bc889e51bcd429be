"""Stable error codes returned by registry operations."""
from enum import IntEnum

from fastapi import status


class ErrorCode(IntEnum):
    UNAUTHORIZED = 100
    ALREADY_REGISTERED = 101
    INVALID_AMOUNT = 102
    INVALID_HASH = 103  # reserved; hash format is rejected at the boundary
    INVALID_STATUS = 104
    INVALID_LENGTH = 105
    NOT_FOUND = 106
    PAUSED = 107


HTTP_STATUS = {
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_HASH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_STATUS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_LENGTH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PAUSED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class RegistryNotDeployed(RuntimeError):
    """Raised when operations run against a store without a config row."""
