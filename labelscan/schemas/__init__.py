"""Pydantic schemas package."""

from labelscan.schemas.analysis import (
    AnalysisResult,
    IngredientAnalysis,
    IngredientEntry,
    PersonalizationSummary,
    PersonalizedAnalysis,
    ProductAssessment,
    RatingSummary,
    SafetyRating,
)
from labelscan.schemas.dietary import (
    CustomAvoidance,
    CustomAvoidanceCreate,
    DietaryPreference,
    DietaryProfile,
    PreferencePatch,
    PreferenceSuggestions,
    ProfileInsights,
    RestrictionCheck,
    RestrictionCheckRequest,
)
from labelscan.schemas.scan import (
    AnalyzeIngredientsRequest,
    AnalyzeTextRequest,
    ExtractionSummary,
    InvalidTransition,
    OCRResult,
    ScanResult,
    ScanSession,
    ScanStatistics,
)

__all__ = [
    "AnalysisResult", "IngredientAnalysis", "IngredientEntry",
    "PersonalizationSummary", "PersonalizedAnalysis", "ProductAssessment",
    "RatingSummary", "SafetyRating",
    "CustomAvoidance", "CustomAvoidanceCreate", "DietaryPreference",
    "DietaryProfile", "PreferencePatch", "PreferenceSuggestions",
    "ProfileInsights", "RestrictionCheck", "RestrictionCheckRequest",
    "AnalyzeIngredientsRequest", "AnalyzeTextRequest", "ExtractionSummary",
    "InvalidTransition", "OCRResult", "ScanResult", "ScanSession", "ScanStatistics",
]
