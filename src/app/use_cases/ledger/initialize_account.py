"""InitializeAccount Use Case

Creates a user's account on first successful login. Safe to call on every
login: existing accounts are only touched to record the login time.
"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.ledger_transaction_repository import LedgerTransactionRepository
from src.domain.base import utc_now
from src.domain.errors import LedgerError
from src.domain.ledger_transaction import LedgerTransaction, TransactionKind
from src.domain.user_account import AccountType, PlanType, UserAccount
from .dtos import AccountResponseDTO, InitializeAccountCommandDTO, account_to_dto

logger = logging.getLogger(__name__)

WELCOME_BONUS_DESCRIPTION = "Welcome Bonus (Admin)"


class InitializeAccount:
    """
    Use Case: Create-if-absent account on login

    Business Rules:
    1. New accounts start as trial with a zero balance
    2. The bootstrap admin email gets is_admin and a welcome bonus credit
       (recorded as a ledger transaction)
    3. Existing accounts keep their state; the bootstrap admin flag is granted
       retroactively if missing
    4. Two simultaneous first logins converge on one account (the losing
       insert is retried as an existing-account login)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: LedgerTransactionRepository,
        bootstrap_admin_email: str = "",
        admin_welcome_bonus: int = 0,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.bootstrap_admin_email = (bootstrap_admin_email or "").strip().lower()
        self.admin_welcome_bonus = admin_welcome_bonus
        self.clock = clock

    def _is_bootstrap_admin(self, email: str) -> bool:
        return bool(self.bootstrap_admin_email) and email.strip().lower() == self.bootstrap_admin_email

    async def execute(self, command: InitializeAccountCommandDTO) -> Result[AccountResponseDTO]:
        try:
            response = await self.uow.run(lambda: self._initialize(command))
        except LedgerError as e:
            return Return.err(e.to_error())
        except Exception as e:
            logger.exception(f"Account initialization failed for user {command.user_id}")
            return Return.err(
                Error(
                    code="INITIALIZE_ACCOUNT_FAILED",
                    message="Failed to initialize account",
                    reason=str(e),
                )
            )

        if response.created:
            logger.info(f"Created account for user {response.user_id} (admin={response.is_admin})")
        return Return.ok(response)

    async def _initialize(self, command: InitializeAccountCommandDTO) -> AccountResponseDTO:
        now = self.clock()
        is_bootstrap_admin = self._is_bootstrap_admin(command.email)

        account = await self.account_repo.get_by_id(command.user_id, for_update=True)

        if account:
            changes = {"last_login": now, "updated_at": now}
            if is_bootstrap_admin and not account.is_admin:
                changes["is_admin"] = True
                logger.info(f"Granting admin to bootstrap account {command.user_id}")
            await self.account_repo.apply_changes(account, changes)
            return account_to_dto(account, changes=changes)

        initial_balance = self.admin_welcome_bonus if is_bootstrap_admin else 0
        account = await self.account_repo.create(
            UserAccount(
                id=command.user_id,
                email=command.email,
                display_name=command.display_name,
                balance=initial_balance,
                account_type=AccountType.TRIAL,
                plan_type=PlanType.NONE,
                is_admin=is_bootstrap_admin,
                is_disabled=False,
                created_at=now,
                updated_at=now,
                last_login=now,
            )
        )

        if initial_balance > 0:
            await self.transaction_repo.create(
                LedgerTransaction(
                    user_id=command.user_id,
                    amount=initial_balance,
                    kind=TransactionKind.CREDIT,
                    description=WELCOME_BONUS_DESCRIPTION,
                    balance_after=initial_balance,
                    created_at=now,
                )
            )

        return account_to_dto(account, created=True)
