from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Sequence, Union


class CircularityResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ratio: Dict[int, float]
    circular_flow: Dict[int, float] = Field(alias="circularFlow")
    total_flow: float = Field(0.0, alias="totalFlow")
    residual_flow: float = Field(0.0, alias="residualFlow")
    flow_by_length: Dict[int, float] = Field(default_factory=dict, alias="flowByLength")
    peel_count: int = Field(0, alias="peelCount")

    @classmethod
    def empty(cls, thresholds: Sequence[int]) -> "CircularityResult":
        return cls(
            ratio={k: 0.0 for k in thresholds},
            circular_flow={k: 0.0 for k in thresholds},
        )


class NodeIn(BaseModel):
    id: str = Field(..., min_length=1)


class EdgeIn(BaseModel):
    source: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, allow_inf_nan=False)


class CircularityRequest(BaseModel):
    nodes: List[Union[str, NodeIn]] = Field(default_factory=list)
    edges: List[EdgeIn] = Field(default_factory=list)
    thresholds: Optional[List[int]] = Field(None, min_length=1)
    include_hodge: bool = False


class CircularityResponse(CircularityResult):
    hodge_ratio: Optional[float] = Field(None, alias="hodgeRatio")


class PeriodCircularity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    period: str
    year: Optional[int] = None
    month: Optional[int] = None
    month_name: Optional[str] = Field(None, alias="monthName")
    accounts: int
    transfers: int
    total_flow: float = Field(alias="totalFlow")
    ratio: Dict[int, float]
    circular_flow: Dict[int, float] = Field(alias="circularFlow")
    hodge_ratio: Optional[float] = Field(None, alias="hodgeRatio")


class ReportSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    periods_analyzed: int = Field(alias="periodsAnalyzed")
    accounts_analyzed: int = Field(alias="accountsAnalyzed")
    transfers_analyzed: int = Field(alias="transfersAnalyzed")
    thresholds: List[int]
    processing_time_seconds: float = Field(alias="processingTimeSeconds")


class CircularityReport(BaseModel):
    periods: List[PeriodCircularity]
    overall: PeriodCircularity
    summary: ReportSummary
