"""Schemas package for request/response models."""

from balance_api.schemas.common import ErrorResponse
from balance_api.schemas.transaction import (
    ClaimResponse,
    CreditRefund,
    TeamTransactionOut,
    TransactionListResponse,
    TransactionOut,
    TransactionStatusUpdate,
    TransactionStatusUpdateResponse,
    WebsiteBalance,
    WithdrawalCreate,
    WithdrawalCreatedResponse,
)
from balance_api.schemas.website import WebsiteListResponse, WebsiteOut

__all__ = [
    # Errors
    "ErrorResponse",
    # Transactions
    "TransactionOut",
    "TeamTransactionOut",
    "ClaimResponse",
    "TransactionListResponse",
    "WithdrawalCreate",
    "WithdrawalCreatedResponse",
    "TransactionStatusUpdate",
    "TransactionStatusUpdateResponse",
    "WebsiteBalance",
    "CreditRefund",
    # Websites
    "WebsiteOut",
    "WebsiteListResponse",
]
