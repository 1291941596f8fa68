"""
FastAPI router for the circularity endpoints.

POST /circularity          JSON transfer graph -> circularity breakdown
POST /circularity/monthly  CSV upload -> per-month circularity report
"""
import logging

from fastapi import APIRouter, UploadFile, File, HTTPException, Query

from ..decomposition.circularity import compute_circularity
from ..decomposition.hodge import compute_hodge_circularity
from ..graph.builder import parse_csv
from ..models import CircularityRequest, CircularityResponse, CircularityReport
from ..orchestrator import analyze_transactions

logger = logging.getLogger(__name__)

router = APIRouter()

# Most recent monthly report, served by GET /report.json
last_report = {"report": None}


@router.post("/circularity", response_model=CircularityResponse, response_model_by_alias=True)
def circularity(payload: CircularityRequest):
    nodes = [n if isinstance(n, str) else n.id for n in payload.nodes]
    edges = [e.model_dump() for e in payload.edges]
    try:
        result = compute_circularity(nodes, edges, payload.thresholds)
        hodge = compute_hodge_circularity(nodes, edges) if payload.include_hodge else None
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CircularityResponse(**result.model_dump(), hodge_ratio=hodge)


@router.post("/circularity/monthly", response_model=CircularityReport, response_model_by_alias=True)
async def circularity_monthly(
    file: UploadFile = File(...),
    include_hodge: bool = Query(False),
):
    """
    Upload a CSV of transfers (sender_id, receiver_id, amount, timestamp).
    Returns circularity per calendar month and for the whole file.
    """
    if not file.filename or not file.filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are supported.")

    content = await file.read()
    if len(content) == 0:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    try:
        df = parse_csv(content)
        report = CircularityReport.model_validate(analyze_transactions(df, include_hodge=include_hodge))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("monthly circularity failed for %s", file.filename)
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")

    last_report["report"] = report
    return report


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": "Circulation circularity engine"}
