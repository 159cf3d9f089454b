from __future__ import annotations

from datetime import date as Date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

ALL_PROFESSIONALS = "all"


class BlockType(str, Enum):
    single = "single"
    recurring = "recurring"


class BlockScope(str, Enum):
    day = "day"
    slot = "slot"


class BlockRule(BaseModel):
    """Stored block rule.

    Cross-field consistency is checked when a rule is created; the engine
    still has to cope with rows that slipped past that check, so the stored
    shape itself is permissive.
    """

    id: str
    professional_id: Optional[str] = ALL_PROFESSIONALS
    type: BlockType
    scope: BlockScope
    date: Optional[Date] = None
    week_day: Optional[int] = None  # 0 = Sunday
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None


class BlockRuleCreateRequest(BaseModel):
    professional_id: str = Field(ALL_PROFESSIONALS, description="Professional id or 'all'")
    type: BlockType
    scope: BlockScope
    date: Optional[Date] = Field(None, description="Required for single rules")
    week_day: Optional[int] = Field(
        None,
        ge=0,
        le=6,
        description="Required for recurring rules (0 = Sunday); derived from date when omitted",
    )
    start_time: Optional[str] = Field(None, description="HH:MM, required for slot scope")
    end_time: Optional[str] = Field(None, description="HH:MM, required for slot scope")
    reason: Optional[str] = None


class BlockRuleListRequest(BaseModel):
    professional_id: Optional[str] = None


class BlockRuleListResponse(BaseModel):
    total: int
    items: List[BlockRule]


class BlockRuleDeleteRequest(BaseModel):
    rule_id: str


class BlockRuleDeleteResponse(BaseModel):
    rule_id: str
    deleted: bool
    recurring: bool = False
