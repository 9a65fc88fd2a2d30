"""
Lexicon Backend: Pydantic Request/Response Schemas
==================================================

What:  The API contract between the backend and its clients.
How:   FastAPI validates request bodies against these models, serializes
       responses through them (by alias, so `keyCount` stays camelCase for
       the existing frontend) and builds the OpenAPI document from them.

Envelope:
    Every successful response is `ApiResponse[T]`:
        {"success": true, "message": "...", "data": T}
    Every error is `ErrorResponse`:
        {"success": false, "message": "...", "errors": [...], "request_id": "..."}
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope shared by every translation endpoint."""

    success: bool = Field(default=True)
    message: str = Field(description="Localized status message")
    data: DataT


class ErrorItem(BaseModel):
    msg: str = Field(description="Human-readable problem description")


class ErrorResponse(BaseModel):
    """
    Error envelope returned by every exception handler and the 404 fallback.

    Example:
        {
            "success": false,
            "message": "Error",
            "errors": [{"msg": "Unsupported language"}],
            "request_id": "3f9a1c2e"
        }
    """

    success: bool = Field(default=False)
    message: str
    errors: Optional[List[ErrorItem]] = None
    request_id: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Read Models
# ══════════════════════════════════════════════════════════════════════════


class LanguageInfo(BaseModel):
    code: str = Field(description="Language code, e.g. 'en'")
    name: str = Field(description="Display name, e.g. 'English'")


class LanguagesData(BaseModel):
    languages: List[LanguageInfo]


class NamespacesData(BaseModel):
    namespaces: List[str]


class NamespaceStatistics(BaseModel):
    """
    Completeness of one (language, namespace) bundle.

    key_count counts top-level keys; nested objects count once.
    """

    model_config = ConfigDict(populate_by_name=True)

    key_count: int = Field(alias="keyCount")
    translated: bool


class StatisticsData(BaseModel):
    statistics: Dict[str, Dict[str, NamespaceStatistics]]


class MissingData(BaseModel):
    """{language: {namespace: [missing keys]}} relative to the reference language."""

    missing: Dict[str, Dict[str, List[str]]]


class NamespaceTranslationsData(BaseModel):
    language: str
    namespace: str
    translations: Dict[str, Any]


class LanguageTranslationsData(BaseModel):
    language: str
    translations: Dict[str, Dict[str, Any]] = Field(
        description="Bundles of every namespace, keyed by namespace"
    )


# ══════════════════════════════════════════════════════════════════════════
# Admin Edit Models
# ══════════════════════════════════════════════════════════════════════════


class TranslationEntry(BaseModel):
    key: str = Field(min_length=1, description="Top-level translation key")
    value: str = Field(description="Translated text")


class TranslationUpdateRequest(BaseModel):
    translations: List[TranslationEntry]


class KeyDeletionRequest(BaseModel):
    keys: List[str]


class EditResultData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    language: str
    namespace: str
    updated_count: Optional[int] = Field(default=None, alias="updatedCount")
    added_count: Optional[int] = Field(default=None, alias="addedCount")
    deleted_count: Optional[int] = Field(default=None, alias="deletedCount")


# ══════════════════════════════════════════════════════════════════════════
# Health
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or degraded")
    version: str
    environment: str
    timestamp: datetime
    uptime_seconds: float
    languages_loaded: int = Field(description="Languages with at least one non-empty bundle")
