"""Fetch of the global plan-limits map for one ledger operation"""

import logging
from typing import Any, Dict, Optional
from src.app.repositories.plan_limits_repository import PlanLimitsRepository

logger = logging.getLogger(__name__)


async def load_plan_limits(plan_limits_repo: PlanLimitsRepository) -> Optional[Dict[str, Any]]:
    """
    Current global plan limits, or None when unset or unreadable

    A None result makes the resolver use DEFAULT_PLAN_LIMITS.
    """
    try:
        setting = await plan_limits_repo.get()
    except Exception as e:
        logger.warning(f"Plan limits unavailable, using defaults: {e}")
        return None
    if setting is None:
        return None
    return setting.limits
