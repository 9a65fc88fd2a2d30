"""
Lexicon Backend: Translation Route Handlers
===========================================

What:  Read access to the translation catalog, mounted at /api/translations.
How:   Thin handlers: run the gates, call LanguageManagementService, wrap the
       result in the `{"success": true, "message", "data"}` envelope.
Who:   The booking frontend (public metadata) and the admin console (bundles).

Route Table (registration order matters):
    GET /languages                 public
    GET /namespaces                public
    GET /statistics                public
    GET /missing                   identity + admin
    GET /{language}/{namespace}    identity + admin
    GET /{language}                identity + admin

    The static paths are registered before the parameterized ones, so
    "/languages" is never captured as a language code. Starlette matches
    path params per segment: "/en" only fits the one-parameter route and
    "/en/common" only fits the two-parameter route.
"""

import logging

from fastapi import APIRouter, Depends

from lexicon.gates import ADMIN_GATES
from lexicon.schemas.translation import (
    ApiResponse,
    ErrorResponse,
    LanguagesData,
    LanguageTranslationsData,
    MissingData,
    NamespacesData,
    NamespaceTranslationsData,
    StatisticsData,
)
from lexicon.services.language_service import (
    LanguageManagementService,
    get_language_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Translations"])

GATED_RESPONSES = {
    400: {"description": "Unsupported language or namespace", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Caller is not an administrator", "model": ErrorResponse},
}


# ── Public metadata ───────────────────────────────────────────────────────


@router.get(
    "/languages",
    response_model=ApiResponse[LanguagesData],
    summary="List supported languages",
)
async def get_supported_languages(
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[LanguagesData]:
    return ApiResponse[LanguagesData](
        message=service.catalog.translate("success"),
        data=LanguagesData(languages=service.get_supported_languages()),
    )


@router.get(
    "/namespaces",
    response_model=ApiResponse[NamespacesData],
    summary="List translation namespaces",
)
async def get_available_namespaces(
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[NamespacesData]:
    return ApiResponse[NamespacesData](
        message=service.catalog.translate("success"),
        data=NamespacesData(namespaces=service.get_available_namespaces()),
    )


@router.get(
    "/statistics",
    response_model=ApiResponse[StatisticsData],
    summary="Translation completeness per language and namespace",
)
async def get_translation_statistics(
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[StatisticsData]:
    """
    Key counts for every (language, namespace) pair.

    Example data:
        {"statistics": {"en": {"common": {"keyCount": 42, "translated": true}}}}
    """
    return ApiResponse[StatisticsData](
        message=service.catalog.translate("success"),
        data=StatisticsData(statistics=service.get_statistics()),
    )


# ── Admin-only ────────────────────────────────────────────────────────────


@router.get(
    "/missing",
    response_model=ApiResponse[MissingData],
    dependencies=ADMIN_GATES,
    responses=GATED_RESPONSES,
    summary="Keys missing relative to the reference language",
)
async def get_missing_translations(
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[MissingData]:
    return ApiResponse[MissingData](
        message=service.catalog.translate("success"),
        data=MissingData(missing=service.find_missing()),
    )


@router.get(
    "/{language}/{namespace}",
    response_model=ApiResponse[NamespaceTranslationsData],
    dependencies=ADMIN_GATES,
    responses=GATED_RESPONSES,
    summary="One language, one namespace",
)
async def get_namespace_translations(
    language: str,
    namespace: str,
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[NamespaceTranslationsData]:
    translations = service.get_translations(language, namespace)
    return ApiResponse[NamespaceTranslationsData](
        message=service.catalog.translate("success"),
        data=NamespaceTranslationsData(
            language=language,
            namespace=namespace,
            translations=translations,
        ),
    )


@router.get(
    "/{language}",
    response_model=ApiResponse[LanguageTranslationsData],
    dependencies=ADMIN_GATES,
    responses=GATED_RESPONSES,
    summary="One language, every namespace",
)
async def get_language_translations(
    language: str,
    service: LanguageManagementService = Depends(get_language_service),
) -> ApiResponse[LanguageTranslationsData]:
    translations = service.get_all_translations(language)
    logger.debug("Served %d namespaces for '%s'", len(translations), language)
    return ApiResponse[LanguageTranslationsData](
        message=service.catalog.translate("success"),
        data=LanguageTranslationsData(language=language, translations=translations),
    )
