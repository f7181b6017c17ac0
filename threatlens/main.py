"""
MAIN API - FastAPI application exposing the analysis services

ENDPOINTS:
- POST /analyze            → layered text analysis (profanity, fact-check, scam, ethics, ascii)
- POST /security-analysis  → pattern-based security report + URL reputation
- GET  /threat-intel       → single indicator reputation lookup
- GET  /health             → liveness
"""

import logging
from fastapi import FastAPI, HTTPException, Depends, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import get_api_key
from .config import get_settings
from .errors import ValidationError
from .models import (
    MAX_CONTENT_LENGTH, AnalyzeRequest, AnalyzeResponse, SecurityAnalysisRequest,
    SecurityAnalysisResponse, ThreatIntelligenceData,
)
from .security_analyzer import analyze_security_patterns
from .text_analysis import TextAnalysisPipeline
from .threat_intel import ThreatIntelligenceCache, ThreatIntelligenceService, extract_indicators

VERSION = "1.0.0"

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="ThreatLens API", version=VERSION)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize components
pipeline = TextAnalysisPipeline.from_settings(settings)
threat_intel = ThreatIntelligenceService(ThreatIntelligenceCache(
    ttl_seconds=settings.cache_ttl_seconds,
    max_entries=settings.cache_max_entries,
))


def _internal_error() -> JSONResponse:
    # Internal details stay in the log, never in the response
    return JSONResponse(
        status_code=500,
        content={"error": "Analysis failed", "message": "Please try again later"},
    )


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_text(request: AnalyzeRequest, response: Response, api_key: str = Depends(get_api_key)):
    """Run the requested analysis options; providers fall back to local heuristics."""
    try:
        results = await pipeline.analyze(request.text, request.options)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Text analysis error")
        return _internal_error()

    response.headers["Cache-Control"] = "no-store"
    return AnalyzeResponse(results=results)


@app.post("/security-analysis", response_model=SecurityAnalysisResponse)
async def security_analysis(request: SecurityAnalysisRequest, api_key: str = Depends(get_api_key)):
    """Security pattern report, enriched with the reputation of every URL in the content."""
    try:
        report = analyze_security_patterns(request.content)
        indicators = await threat_intel.lookup_many(extract_indicators(request.content))
    except Exception:
        logger.exception("Security analysis error")
        return _internal_error()

    return SecurityAnalysisResponse(**report.model_dump(), indicators=indicators)


@app.get("/threat-intel", response_model=ThreatIntelligenceData)
async def threat_intel_lookup(
    indicator: str = Query(..., min_length=1, max_length=MAX_CONTENT_LENGTH),
    indicator_type: str = Query("url", alias="type"),
    api_key: str = Depends(get_api_key),
):
    """Reputation for one URL, domain, IP or hash."""
    try:
        return await threat_intel.lookup(indicator, indicator_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": VERSION}
