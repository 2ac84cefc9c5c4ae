"""Admin API Routes

Manual balance adjustments, plan changes, account flags and the global plan
limits. Every route requires the caller (X-User-Id) to be an admin.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.schemas.admin_request import (
    AdjustBalanceRequestSchema,
    SetDailyLimitRequestSchema,
    SetDisabledRequestSchema,
    UpdatePlanLimitsRequestSchema,
    UpgradePlanRequestSchema,
)
from src.app.use_cases.admin.dtos import (
    AdjustBalanceCommandDTO,
    ListUsersResponseDTO,
    PlanChangeResponseDTO,
    PlanLimitsDTO,
    UpdatePlanLimitsCommandDTO,
    UpgradeToPlanCommandDTO,
)
from src.app.use_cases.admin.adjust_balance import AdjustBalance
from src.app.use_cases.admin.upgrade_to_plan import UpgradeToPlan
from src.app.use_cases.admin.downgrade_to_trial import DowngradeToTrial
from src.app.use_cases.admin.set_disabled import SetDisabled
from src.app.use_cases.admin.set_custom_daily_limit import SetCustomDailyLimit
from src.app.use_cases.admin.list_users import ListUsers
from src.app.use_cases.admin.get_plan_limits import GetPlanLimits
from src.app.use_cases.admin.update_plan_limits import UpdatePlanLimits
from src.app.use_cases.ledger.dtos import (
    AccountResponseDTO,
    LedgerOperationResponseDTO,
    ReconciliationResultDTO,
)
from src.app.use_cases.ledger.reconcile_ledger import ReconcileLedger
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.adapter.repositories.plan_limits_repository import SqlAlchemyPlanLimitsRepository
from src.depends import build_unit_of_work, get_session
from src.api.error import ClientError


async def require_admin(
    x_user_id: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Optional[str]:
    """Acting admin id, taken from the X-User-Id header"""
    if ApplicationConfig.AUTH_DISABLED:
        return x_user_id

    if not x_user_id:
        raise ClientError(
            Error(code="UNAUTHORIZED", message="X-User-Id header is required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    account = await SqlAlchemyUserAccountRepository(session).get_by_id(x_user_id)
    if not account or not account.is_admin or account.is_disabled:
        raise ClientError(
            Error(
                code="FORBIDDEN",
                message="Admin privileges required",
                details={"user_id": x_user_id},
            ),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return x_user_id


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/users",
    response_model=ListUsersResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """All accounts, most recently created first."""
    use_case = ListUsers(SqlAlchemyUserAccountRepository(session))
    result = await use_case.execute(limit=limit, offset=offset)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/users/{user_id}/balance",
    response_model=LedgerOperationResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def adjust_balance(
    user_id: str,
    request: AdjustBalanceRequestSchema,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """
    Credit (positive delta) or debit (negative delta) a user's balance.

    No balance check is made; the result may be negative.
    """
    use_case = AdjustBalance(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
    )
    result = await use_case.execute(
        AdjustBalanceCommandDTO(
            user_id=user_id,
            delta=request.delta,
            reason=request.reason,
            performed_by=admin_id,
        )
    )

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/users/{user_id}/plan",
    response_model=PlanChangeResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def upgrade_plan(
    user_id: str,
    request: UpgradePlanRequestSchema,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Put a user on a paid plan and credit the plan's points."""
    use_case = UpgradeToPlan(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
        point_allotments=ApplicationConfig.PLAN_POINT_ALLOTMENTS,
        plan_duration_days=ApplicationConfig.PLAN_DURATION_DAYS,
    )
    result = await use_case.execute(
        UpgradeToPlanCommandDTO(
            user_id=user_id,
            plan=request.plan,
            reason=request.reason,
            points=request.points,
            performed_by=admin_id,
        )
    )

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.delete(
    "/users/{user_id}/plan",
    response_model=AccountResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def downgrade_plan(
    user_id: str,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Move a user back to trial. The balance is kept."""
    use_case = DowngradeToTrial(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
    )
    result = await use_case.execute(user_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.put(
    "/users/{user_id}/disabled",
    response_model=AccountResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def set_disabled(
    user_id: str,
    request: SetDisabledRequestSchema,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    use_case = SetDisabled(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
    )
    result = await use_case.execute(user_id, request.disabled)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.put(
    "/users/{user_id}/daily-limit",
    response_model=AccountResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def set_daily_limit(
    user_id: str,
    request: SetDailyLimitRequestSchema,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Set a per-user daily limit override (no cooldown), or clear it with null."""
    use_case = SetCustomDailyLimit(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
    )
    result = await use_case.execute(user_id, request.limit)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/plan-limits",
    response_model=PlanLimitsDTO,
    status_code=status.HTTP_200_OK,
)
async def get_plan_limits(
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Effective limits per plan (stored values merged over the defaults)."""
    result = await GetPlanLimits(SqlAlchemyPlanLimitsRepository(session)).execute()

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.put(
    "/plan-limits",
    response_model=PlanLimitsDTO,
    status_code=status.HTTP_200_OK,
)
async def update_plan_limits(
    request: UpdatePlanLimitsRequestSchema,
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Replace the stored plan limits. Plans left out fall back to their defaults."""
    use_case = UpdatePlanLimits(
        build_unit_of_work(session),
        SqlAlchemyPlanLimitsRepository(session),
    )
    result = await use_case.execute(
        UpdatePlanLimitsCommandDTO(limits=request.limits, performed_by=admin_id)
    )

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/ledger/reconcile",
    response_model=ReconciliationResultDTO,
    status_code=status.HTTP_200_OK,
)
async def reconcile_ledger(
    admin_id: Optional[str] = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Compare every balance with the sum of its transactions. Read-only."""
    use_case = ReconcileLedger(
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value
