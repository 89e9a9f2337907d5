from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal
from datetime import datetime

RequestStatus = Literal["pending", "accepted", "rejected", "completed"]
StatusFilter = Literal["all", "pending", "accepted", "rejected", "completed"]
RequestDirection = Literal["all", "sent", "received"]
StatusDecision = Literal["accepted", "rejected"]

# ======================
# REQUEST INPUT MODELS
# ======================

class SwapRequestCreate(BaseModel):
    recipient_id: str = Field(..., max_length=36)
    offered_skill: str = Field(..., max_length=100)
    wanted_skill: str = Field(..., max_length=100)
    message: str


class RequestFilters(BaseModel):
    status: Optional[StatusFilter] = None
    search: Optional[str] = None
    direction: Optional[RequestDirection] = None

# ======================
# REQUEST RESPONSE MODELS
# ======================

class SwapRequestResponse(BaseModel):
    id: str
    requester_id: str
    recipient_id: str
    requester_name: str
    recipient_name: str
    requester_avatar: Optional[str] = None
    recipient_avatar: Optional[str] = None
    requester_rating: Optional[float] = None
    recipient_rating: Optional[float] = None
    offered_skill: str
    wanted_skill: str
    message: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RequestPage(BaseModel):
    """One page of the swap-request inbox."""
    requests: List[SwapRequestResponse] = []
    total: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 10
    error: Optional[str] = None


class SwapRequestResult(BaseModel):
    request: Optional[SwapRequestResponse] = None
    error: Optional[str] = None


class StatusUpdateResult(BaseModel):
    success: bool
    request: Optional[SwapRequestResponse] = None
    error: Optional[str] = None
