"""Ledger API Routes

FastAPI routes for point deductions, refunds and balance/usage reads.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.ledger_request import DeductRequestSchema, RefundRequestSchema
from src.app.use_cases.ledger.dtos import (
    BalanceResponseDTO,
    DeductCommandDTO,
    LedgerOperationResponseDTO,
    ListTransactionsResponseDTO,
    RefundCommandDTO,
    UsageStatusResponseDTO,
)
from src.app.use_cases.ledger.deduct_points import DeductPoints
from src.app.use_cases.ledger.refund_points import RefundPoints
from src.app.use_cases.ledger.get_balance import GetBalance
from src.app.use_cases.ledger.list_transactions import ListTransactions
from src.app.use_cases.ledger.get_usage_status import GetUsageStatus
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.adapter.repositories.plan_limits_repository import SqlAlchemyPlanLimitsRepository
from src.depends import build_unit_of_work, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.post(
    "/deduct",
    response_model=LedgerOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        402: {
            "description": "Insufficient points",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_FUNDS",
                            "message": "Insufficient points. Required: 30, Available: 10",
                            "details": {"balance": 10, "required": 30}
                        }
                    }
                }
            }
        },
        429: {
            "description": "Daily limit reached or cooldown active",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "COOLDOWN_ACTIVE",
                            "message": "Please wait 5 minute(s) before the next generation",
                            "details": {"remaining_minutes": 5}
                        }
                    }
                }
            }
        },
        403: {"description": "Account disabled"},
        404: {"description": "User account not found"},
        409: {"description": "Too much concurrent activity on the account"},
    }
)
async def deduct_points(
    request: DeductRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Charge points for a generation and consume daily quota.

    Balance, daily limit and cooldown are checked and applied atomically, so
    concurrent requests for the same user can never overspend.

    Disabled accounts are rejected inside the same locked read, so a disable
    committed before the deduction is always honoured.

    **Request body:**
    - `user_id` (required): User identifier
    - `amount` (required): Points to deduct (>= 0)
    - `description` (required): Reason shown in the history
    - `related_order_id` (optional): Order the charge belongs to
    - `usage_delta` (optional, default 1): Quota units consumed; 0 skips quota and cooldown

    **Returns:**
    - 200: Points deducted
    - 402: Insufficient points
    - 403: Account disabled
    - 404: Unknown user
    - 429: Daily limit reached or cooldown active
    - 409: Could not commit because of concurrent activity
    """
    command = DeductCommandDTO(
        user_id=request.user_id,
        amount=request.amount,
        description=request.description,
        related_order_id=request.related_order_id,
        usage_delta=request.usage_delta,
    )

    use_case = DeductPoints(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
        SqlAlchemyPlanLimitsRepository(session),
        enforce_enabled=True,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/refund",
    response_model=LedgerOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "User account not found"}}
)
async def refund_points(
    request: RefundRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Return points (and quota) after a generation failed.

    Callers refund with a description like `"Refund: <reason> Failed"`.
    """
    command = RefundCommandDTO(
        user_id=request.user_id,
        amount=request.amount,
        description=request.description,
        related_order_id=request.related_order_id,
        usage_restore_count=request.usage_restore_count,
    )

    use_case = RefundPoints(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/balance/{user_id}",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_balance(
    user_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get the current points balance.

    Unknown users read as a balance of 0 with `last_updated` null.
    """
    use_case = GetBalance(SqlAlchemyUserAccountRepository(session))
    result = await use_case.execute(user_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/transactions/{user_id}",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    user_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """Transaction history, newest first."""
    use_case = ListTransactions(SqlAlchemyLedgerTransactionRepository(session))
    result = await use_case.execute(user_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/usage/{user_id}",
    response_model=UsageStatusResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "User account not found"}}
)
async def get_usage_status(
    user_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Plan limits, today's usage and remaining cooldown for a user."""
    use_case = GetUsageStatus(
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyPlanLimitsRepository(session),
    )
    result = await use_case.execute(user_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value
