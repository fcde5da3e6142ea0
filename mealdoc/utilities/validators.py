"""
Input validation schemas using Pydantic for the export endpoints.
"""
from pydantic import BaseModel, Field, AliasChoices, field_validator
from typing import Any, Dict, Optional


class ExportRequest(BaseModel):
    """Schema for a meal plan export request (camelCase or snake_case keys)."""
    plan_data: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices('plan_data', 'planData'))
    plan_type: str = Field(
        'daily', pattern=r'^(daily|weekly|monthly)$', validation_alias=AliasChoices('plan_type', 'planType'))
    created_at: Optional[str] = Field(
        None, max_length=64, validation_alias=AliasChoices('created_at', 'createdAt'))
    is_free_tier: bool = Field(
        False, validation_alias=AliasChoices('is_free_tier', 'isFreeTier'))

    @field_validator('plan_type', mode='before')
    @classmethod
    def normalize_plan_type(cls, v):
        """Accept 'Weekly', ' monthly ' and similar."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('created_at')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace; blank means 'now'."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    def render_options(self) -> Dict[str, Any]:
        return {
            'planType': self.plan_type,
            'createdAt': self.created_at,
            'isFreeTier': self.is_free_tier,
        }
