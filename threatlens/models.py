from pydantic import BaseModel, Field
from typing import List, Optional, Literal

RiskLevel = Literal["minimal", "low", "medium", "high", "critical"]
Severity = Literal["info", "warning", "danger"]
ThreatLevel = Literal["low", "medium", "high", "critical"]
IndicatorType = Literal["url", "domain", "ip", "hash"]
CheckStatus = Literal["clean", "warning", "danger"]

# Upper bound on submitted text, in characters
MAX_CONTENT_LENGTH = 10000


class SecurityThreat(BaseModel):
    type: str  # Pattern label or synthetic threat name ("Multiple URLs")
    severity: Severity
    confidence: float  # 0.0 - 1.0, never 1.0
    description: str
    mitigation: str  # Never empty

class PatternMatch(BaseModel):
    pattern: str  # Pattern label
    matches: int  # Occurrence count (>= 1)
    riskScore: int  # Saturated risk contribution

class SecurityAnalysisResult(BaseModel):
    overallScore: int  # 0 - 100, 100 means nothing suspicious
    riskLevel: RiskLevel
    threats: List[SecurityThreat] = Field(default_factory=list)
    patterns: List[PatternMatch] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

class ThreatIntelligenceData(BaseModel):
    isMalicious: bool
    threatLevel: ThreatLevel
    categories: List[str] = Field(default_factory=list)
    confidence: float
    sources: List[str] = Field(default_factory=list)
    lastSeen: Optional[str] = None  # ISO-8601 timestamp
    description: Optional[str] = None

class IndicatorReport(BaseModel):
    indicator: str
    type: IndicatorType
    intelligence: ThreatIntelligenceData

class AnalysisResult(BaseModel):
    type: str  # "profanity check", "fact check", "scam detection", ...
    status: CheckStatus
    message: str
    confidence: Optional[float] = None

class AnalyzeRequest(BaseModel):
    text: str
    options: List[str]

class AnalyzeResponse(BaseModel):
    results: List[AnalysisResult]

class SecurityAnalysisRequest(BaseModel):
    content: str = Field(max_length=MAX_CONTENT_LENGTH)

class SecurityAnalysisResponse(SecurityAnalysisResult):
    indicators: List[IndicatorReport] = Field(default_factory=list)
