### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Ingestion Schemas -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Ingestion Schemas

Payloads accepted by POST /api/portal/log. The body is a tagged union on
"type"; validation either produces a fully populated record of one of
the six kinds or rejects the request. Unknown types are rejected.

Usage reports arrive from several SDKs with different cost field names.
UsageIn folds them into one canonical shape:

    breakdown.inputCost  | breakdown.promptUSD      -> prompt_usd
    breakdown.outputCost | breakdown.completionUSD  -> completion_usd
    breakdown.cachedCost | breakdown.cachedUSD      -> cached_usd
    breakdown.total | costUSD | cost                -> total
    costUSD | cost                                  -> cost_usd
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

MAX_MESSAGE_LENGTH = 10_000
MAX_TAGS = 20

NonNegativeNumber = Annotated[float, Field(ge=0, strict=True)]
NonNegativeCount = Annotated[int, Field(ge=0, strict=True)]


def _first_present(source: dict, *keys: str) -> Any:
    """First key whose value is not None (0 counts as present)"""
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _first_truthy(source: dict, *keys: str) -> Any:
    """First key whose value is truthy (0 falls through to the next key)"""
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


def _clean_tags(tags: Optional[List[Any]]) -> List[str]:
    """Stringify, trim and de-duplicate tags, keeping first-seen order"""
    seen: List[str] = []
    for tag in tags or []:
        text = str(tag).strip()
        if text and text not in seen:
            seen.append(text)
    return seen[:MAX_TAGS]


class UsageBreakdown(BaseModel):
    """Canonical cost breakdown (USD)"""

    prompt_usd: NonNegativeNumber = 0.0
    completion_usd: NonNegativeNumber = 0.0
    cached_usd: NonNegativeNumber = 0.0
    total: NonNegativeNumber = 0.0


class UsageIn(BaseModel):
    """Canonical usage record"""

    model: Optional[str] = Field(None, max_length=100)
    user: Optional[str] = Field(None, max_length=255)
    prompt_tokens: NonNegativeCount = 0
    completion_tokens: NonNegativeCount = 0
    cached_tokens: NonNegativeCount = 0
    cost_usd: NonNegativeNumber = 0.0
    breakdown: UsageBreakdown = Field(default_factory=UsageBreakdown)

    @model_validator(mode="before")
    @classmethod
    def normalize_cost_fields(cls, data: Any) -> Any:
        if data is None:
            return {}
        if not isinstance(data, dict):
            return data

        raw_breakdown = data.get("breakdown")
        if raw_breakdown is None:
            raw_breakdown = {}
        if not isinstance(raw_breakdown, dict):
            raise ValueError("breakdown must be an object")

        # costUSD of 0 falls through to cost; the breakdown total keeps an explicit 0
        cost = _first_truthy(data, "costUSD", "cost", "cost_usd")
        breakdown = {
            "prompt_usd": _first_present(raw_breakdown, "inputCost", "promptUSD", "prompt_usd"),
            "completion_usd": _first_present(raw_breakdown, "outputCost", "completionUSD", "completion_usd"),
            "cached_usd": _first_present(raw_breakdown, "cachedCost", "cachedUSD", "cached_usd"),
            "total": _first_present(raw_breakdown, "total"),
        }

        if breakdown["total"] is None:
            breakdown["total"] = _first_present(data, "costUSD", "cost", "cost_usd")

        return {
            "model": data.get("model"),
            "user": data.get("user"),
            "prompt_tokens": data.get("prompt_tokens") or 0,
            "completion_tokens": data.get("completion_tokens") or 0,
            "cached_tokens": data.get("cached_tokens") or 0,
            "cost_usd": cost if cost is not None else 0.0,
            "breakdown": {k: (0.0 if v is None else v) for k, v in breakdown.items()},
        }


class EventLog(BaseModel):
    type: Literal["event"]
    role: Optional[str] = Field(None, max_length=32)
    message: Optional[str] = Field(None, max_length=MAX_MESSAGE_LENGTH)


class ErrorLog(BaseModel):
    type: Literal["error"]
    user: Optional[str] = Field(None, max_length=255)
    message: Optional[str] = Field(None, max_length=MAX_MESSAGE_LENGTH)


class UsageLog(BaseModel):
    type: Literal["usage"]
    usage: UsageIn = Field(default_factory=UsageIn)


class MetricLog(BaseModel):
    type: Literal["metric"]
    metric_type: str = Field(..., alias="metricType", min_length=1, max_length=50)
    value: Any = None

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def numeric_samples(self) -> "MetricLog":
        """latency samples must be non-negative numbers"""
        if self.metric_type == "latency":
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)) or self.value < 0:
                raise ValueError("latency value must be a non-negative number")
        return self


class LeadLog(BaseModel):
    type: Literal["lead"]
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> List[str]:
        if v is not None and not isinstance(v, list):
            raise ValueError("tags must be a list")
        return _clean_tags(v)


class ConversationData(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)
    snippet: Optional[str] = Field(None, max_length=MAX_MESSAGE_LENGTH)
    last_message: Optional[str] = Field(None, alias="lastMessage", max_length=MAX_MESSAGE_LENGTH)
    tags: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> List[str]:
        if v is not None and not isinstance(v, list):
            raise ValueError("tags must be a list")
        return _clean_tags(v)

    @property
    def display_snippet(self) -> str:
        return self.snippet or self.last_message or ""


class ConversationLog(BaseModel):
    type: Literal["conversation"]
    session_id: str = Field(..., alias="sessionId", min_length=1, max_length=128)
    data: ConversationData = Field(default_factory=ConversationData)

    class Config:
        populate_by_name = True


LogPayload = Annotated[
    Union[EventLog, ErrorLog, UsageLog, MetricLog, LeadLog, ConversationLog],
    Field(discriminator="type"),
]

LOG_TYPES = ("event", "error", "usage", "metric", "lead", "conversation")

log_payload_adapter = TypeAdapter(LogPayload)


def parse_log_payload(body: Any) -> Union[EventLog, ErrorLog, UsageLog, MetricLog, LeadLog, ConversationLog]:
    """
    Validate a raw ingestion body.

    Raises:
        pydantic.ValidationError: If the type is unknown or fields are invalid
    """
    return log_payload_adapter.validate_python(body)
