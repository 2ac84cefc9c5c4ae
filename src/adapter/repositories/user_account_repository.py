"""SQLAlchemy implementation of UserAccountRepository

Combines pessimistic row locking (SELECT FOR UPDATE, where the database
supports it) with a compare-and-swap on ``version`` so two concurrent
units of work can never both commit against the same balance.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.base import utc_now
from src.domain.errors import ConcurrentUpdateError
from src.domain.user_account import UserAccount


class SqlAlchemyUserAccountRepository(UserAccountRepository):
    """
    SQLAlchemy implementation of UserAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Optimistic compare-and-swap on the version column
    - Reads always refresh objects already present in the session
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID with optional row-level locking

        Args:
            user_id: Identity-provider user id
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            UserAccount if found, None otherwise
        """
        stmt = (
            select(UserAccount)
            .where(UserAccount.id == user_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: UserAccount) -> UserAccount:
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Another login created the same account first
            raise ConcurrentUpdateError(account.id) from e
        await self.session.refresh(account)
        return account

    async def apply_changes(self, account: UserAccount, changes: Dict[str, Any]) -> None:
        """
        Compare-and-swap update of the account row

        Note:
            The in-session ``account`` object is synchronized with the new values.
        """
        values = dict(changes)
        values["version"] = account.version + 1
        values.setdefault("updated_at", utc_now())

        stmt = (
            update(UserAccount)
            .where(UserAccount.id == account.id)
            .where(UserAccount.version == account.version)
            .values(**values)
        )
        result = await self.session.execute(stmt)

        if result.rowcount != 1:
            raise ConcurrentUpdateError(account.id)

    async def get_all(self) -> List[UserAccount]:
        stmt = select(UserAccount).order_by(UserAccount.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_accounts(self, limit: int = 50, offset: int = 0) -> Tuple[List[UserAccount], int]:
        count_result = await self.session.execute(select(func.count()).select_from(UserAccount))
        total = count_result.scalar()

        stmt = (
            select(UserAccount)
            .order_by(UserAccount.created_at.desc(), UserAccount.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
