"""Render options: plan type, creation timestamp and free-tier watermark flag."""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from mealdoc.utilities.constants import PLAN_TYPES, DEFAULT_PLAN_TYPE

logger = logging.getLogger(__name__)


def parse_created_at(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp ('Z' suffix allowed); fall back to now (UTC)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Unparseable createdAt %r; using current time", value)
    return datetime.now(timezone.utc)


def parse_flag(value: Any) -> bool:
    """Real booleans as-is; 'true'/'1'/'yes' strings are true; anything else is false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return False


class RenderOptions:
    def __init__(self, plan_type: str = DEFAULT_PLAN_TYPE, created_at: Optional[datetime] = None,
                 is_free_tier: bool = False):
        self.plan_type = plan_type
        self.created_at = created_at or datetime.now(timezone.utc)
        self.is_free_tier = is_free_tier

    def __str__(self) -> str:
        return f"{self.plan_type} plan - created {self.created_at.isoformat()} - free tier: {self.is_free_tier}"

    __repr__ = __str__

    @property
    def plan_label(self) -> str:
        return f"{self.plan_type.upper()} PLAN"

    @property
    def created_label(self) -> str:
        # 'January 1, 2024'
        return f"{self.created_at:%B} {self.created_at.day}, {self.created_at.year}"

    @staticmethod
    def from_dict(data) -> 'RenderOptions':
        d = data if isinstance(data, dict) else {}
        plan_type = str(d.get('planType', d.get('plan_type')) or DEFAULT_PLAN_TYPE).strip().lower()
        if plan_type not in PLAN_TYPES:
            logger.warning("Unknown plan type %r; rendering as %s", plan_type, DEFAULT_PLAN_TYPE)
            plan_type = DEFAULT_PLAN_TYPE
        return RenderOptions(
            plan_type=plan_type,
            created_at=parse_created_at(d.get('createdAt', d.get('created_at'))),
            is_free_tier=parse_flag(d.get('isFreeTier', d.get('is_free_tier', False))),
        )

    def to_dict(self):
        return {
            "planType": self.plan_type,
            "createdAt": self.created_at.isoformat(),
            "isFreeTier": self.is_free_tier,
        }
