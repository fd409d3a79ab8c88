"""API routes for team transactions."""

from fastapi import APIRouter, status

from balance_api.core.dependencies import TeamApiKey, TransactionServiceDep
from balance_api.schemas.common import ErrorResponse
from balance_api.schemas.transaction import (
    TransactionListResponse,
    TransactionStatusUpdate,
    TransactionStatusUpdateResponse,
    WithdrawalCreate,
    WithdrawalCreatedResponse,
)

router = APIRouter(prefix="/team", tags=["team-transactions"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.get("/transactions", response_model=TransactionListResponse, responses=_ERROR_RESPONSES)
async def list_transactions(
    api_key: TeamApiKey,
    transaction_service: TransactionServiceDep,
) -> dict:
    """List all transactions of the calling team, newest first."""
    team, transactions = await transaction_service.list_transactions(api_key)
    return {
        "success": True,
        "team_id": team.id,
        "team_name": team.name,
        "transaction_count": len(transactions),
        "transactions": transactions,
    }


@router.post(
    "/transactions",
    response_model=WithdrawalCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_withdrawal(
    request: WithdrawalCreate,
    api_key: TeamApiKey,
    transaction_service: TransactionServiceDep,
) -> dict:
    """Create a pending withdrawal and debit the website balance.

    Either `websiteId` or `websiteName` identifies the website; the pair
    `customerUsername` + `transactionId` must be unique.
    """
    _, transaction = await transaction_service.create_withdrawal(api_key, request)
    return {
        "success": True,
        "message": "Withdrawal transaction created successfully",
        "data": transaction,
    }


@router.post(
    "/update-transaction",
    response_model=TransactionStatusUpdateResponse,
    responses=_ERROR_RESPONSES,
)
async def update_transaction_status(
    request: TransactionStatusUpdate,
    api_key: TeamApiKey,
    transaction_service: TransactionServiceDep,
) -> dict:
    """Mark a pending or in-progress transaction as "สำเร็จ" or "ล้มเหลว".

    Failing a withdrawal refunds its amount to the website balance.
    """
    return await transaction_service.update_status(api_key, request)
