"""Unit of Work Interface

A unit of work wraps one database transaction. ``run`` executes a whole
atomic unit, commits it on success, rolls it back on any exception, and
re-runs it when the store reports contention. Use cases never retry on
their own.
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar
from src.domain.errors import ConcurrentUpdateError, StoreContentionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5


class UnitOfWork(ABC):
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    def is_contention(self, exc: BaseException) -> bool:
        """Whether ``exc`` means the unit lost a race and may simply be re-run"""
        return isinstance(exc, ConcurrentUpdateError)

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``work`` as one atomic unit

        Args:
            work: Coroutine factory performing every read and write of the unit

        Returns:
            Whatever ``work`` returned, after a successful commit

        Raises:
            StoreContentionError: If every attempt lost a race
            Exception: Anything else raised by ``work`` or the commit, after rollback
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                outcome = await work()
                await self.commit()
                return outcome
            except Exception as e:
                await self.rollback()
                if not self.is_contention(e):
                    raise
                if attempt >= self.max_attempts:
                    logger.warning(f"Giving up after {attempt} contended attempts: {e}")
                    raise StoreContentionError(attempt) from e
                logger.info(f"Store contention on attempt {attempt}, retrying: {e}")
