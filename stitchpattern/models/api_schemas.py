from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..settings import DEFAULT_BRAND
from .pattern import ReferenceColor


class JobStatus(BaseModel):
    job_id: str
    status: Literal["done", "processing", "failed", "pending"]
    progress: float
    meta: dict[str, Any] = Field(default_factory=dict)
    grid: Optional[dict] = None


class JobList(BaseModel):
    items: List[JobStatus]
    total: int


class MetaUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    clothCount: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = None
    author: Optional[str] = None
    notes: Optional[str] = None


class MatchRequest(BaseModel):
    rgb: Tuple[float, float, float]
    brand: str = DEFAULT_BRAND
    candidates: Optional[List[str]] = Field(
        default=None,
        description="Restrict the search to these catalog codes, in this order.",
    )


class MatchResponse(BaseModel):
    color: ReferenceColor
    distance: float


class CatalogResponse(BaseModel):
    brand: str
    colors: List[ReferenceColor]
