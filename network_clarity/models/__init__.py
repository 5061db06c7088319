# Models package: re-export the public models for convenience.
# Prefer importing from the specific submodule (e.g. network_clarity.models.tracking).

from network_clarity.models.cookies import (
    CategoryInfo as CategoryInfo,
    CookieCategory as CookieCategory,
    CookieExplanation as CookieExplanation,
    CookieReport as CookieReport,
    CookieRisk as CookieRisk,
    ExplainedCookie as ExplainedCookie,
    ExplainedSetCookie as ExplainedSetCookie,
    ParsedCookie as ParsedCookie,
    ParsedSetCookie as ParsedSetCookie,
)
from network_clarity.models.explanations import (
    HeaderCategory as HeaderCategory,
    HeaderExplanation as HeaderExplanation,
    StatusExplanation as StatusExplanation,
    TypeExplanation as TypeExplanation,
)
from network_clarity.models.messages import (
    BeginRequest as BeginRequest,
    ClearTab as ClearTab,
    Command as Command,
    CompleteRequest as CompleteRequest,
    CookieAnalysisRequest as CookieAnalysisRequest,
    GetTabData as GetTabData,
    MessageResponse as MessageResponse,
    PIIAnalysisRequest as PIIAnalysisRequest,
    RecordRequestHeaders as RecordRequestHeaders,
    RecordResponseHeaders as RecordResponseHeaders,
    RequestInspection as RequestInspection,
    TabClosed as TabClosed,
    TabNavigated as TabNavigated,
)
from network_clarity.models.pii import (
    PIIDetectionResult as PIIDetectionResult,
    PIILocation as PIILocation,
    PIIMatch as PIIMatch,
    PIIRiskLevel as PIIRiskLevel,
    PIIType as PIIType,
)
from network_clarity.models.score import (
    PenaltyBreakdown as PenaltyBreakdown,
    PrivacyGrade as PrivacyGrade,
    PrivacyScoreResult as PrivacyScoreResult,
)
from network_clarity.models.tracking import (
    HarEntry as HarEntry,
    Header as Header,
    NetworkRequestRecord as NetworkRequestRecord,
    RequestClassification as RequestClassification,
    RequestTiming as RequestTiming,
    RequestType as RequestType,
    TabData as TabData,
    TabStats as TabStats,
)
