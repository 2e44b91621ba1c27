import logging
from fastapi import APIRouter, HTTPException, UploadFile, File
from pydantic import BaseModel
from agents.analysis_agent import DataAnalysisAgent
from agents.orchestrator import GENERIC_FAILURE
from services.llm_service import get_llm_service

logger = logging.getLogger("api.analysis")
router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


class AnalysisRequest(BaseModel):
    data: str = ""


async def run_analysis(data: str) -> dict:
    if not data or not data.strip():
        raise HTTPException(status_code=400, detail="Provide data to analyze")

    result = await DataAnalysisAgent(get_llm_service()).execute(data)
    if not result.ok:
        logger.error(f"Data analysis failed: {result.error}")
        raise HTTPException(status_code=502, detail=GENERIC_FAILURE)
    return result.output.model_dump(mode="json")


@router.post("")
async def analyze(body: AnalysisRequest):
    """Summarize pasted data and propose a chart."""
    return await run_analysis(body.data)


@router.post("/upload")
async def analyze_upload(file: UploadFile = File(...)):
    """Same as ``analyze`` for an uploaded CSV or text file."""
    content = await file.read()
    return await run_analysis(content.decode("utf-8", errors="replace"))
