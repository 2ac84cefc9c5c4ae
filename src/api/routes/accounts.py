"""Account API Routes"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.ledger_request import InitializeAccountRequestSchema
from src.app.use_cases.ledger.dtos import AccountResponseDTO, InitializeAccountCommandDTO
from src.app.use_cases.ledger.initialize_account import InitializeAccount
from src.adapter.repositories.user_account_repository import SqlAlchemyUserAccountRepository
from src.adapter.repositories.ledger_transaction_repository import SqlAlchemyLedgerTransactionRepository
from src.depends import build_unit_of_work, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post(
    "",
    response_model=AccountResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={201: {"description": "Account created"}}
)
async def initialize_account(
    request: InitializeAccountRequestSchema,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    """
    Create the account on first login, or record the login of an existing one.

    **Returns:**
    - 201: Account created
    - 200: Account already existed
    """
    use_case = InitializeAccount(
        build_unit_of_work(session),
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyLedgerTransactionRepository(session),
        bootstrap_admin_email=ApplicationConfig.BOOTSTRAP_ADMIN_EMAIL,
        admin_welcome_bonus=ApplicationConfig.ADMIN_WELCOME_BONUS,
    )
    result = await use_case.execute(
        InitializeAccountCommandDTO(
            user_id=request.user_id,
            email=request.email,
            display_name=request.display_name,
        )
    )

    if result.is_err():
        raise ClientError.from_error(result.error)

    if result.value.created:
        response.status_code = status.HTTP_201_CREATED
    return result.value
