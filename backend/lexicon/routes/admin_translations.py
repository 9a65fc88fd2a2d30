"""
Lexicon Backend: Admin Translation Management Routes
====================================================

What:  Edit resource bundles in place, mounted at /api/admin/translations.
How:   Every route sits behind the identity and admin gates (router level);
       handlers delegate to TranslationEditor, which rewrites the JSON file
       and refreshes the in-memory catalog.
Who:   The admin console's translation editor.

Request bodies are decoded by `admin_body(...)` dependencies that depend on
the admin gate, so a caller without a valid admin token gets 401/403 even
when the body is malformed.

Routes:
    PUT    /{language}/{namespace}          overwrite or insert keys
    POST   /{language}/{namespace}/add      insert new keys only
    DELETE /{language}/{namespace}/delete   remove keys (JSON body)
"""

import logging
from typing import Type, TypeVar

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from lexicon.exceptions import ValidationError
from lexicon.gates import ADMIN_GATES, Identity, require_admin
from lexicon.responses import validation_error_items
from lexicon.schemas.translation import (
    ApiResponse,
    EditResultData,
    ErrorResponse,
    KeyDeletionRequest,
    TranslationUpdateRequest,
)
from lexicon.services.translation_editor import TranslationEditor, get_translation_editor

logger = logging.getLogger(__name__)

BodyT = TypeVar("BodyT", bound=BaseModel)

router = APIRouter(
    tags=["Admin Translations"],
    dependencies=ADMIN_GATES,
    responses={
        400: {"description": "Unsupported language, namespace or malformed body", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
        403: {"description": "Caller is not an administrator", "model": ErrorResponse},
        404: {"description": "Translation file not found", "model": ErrorResponse},
    },
)


def admin_body(model: Type[BodyT]):
    """
    Dependency that decodes the JSON body into `model` once the caller is a
    verified admin.

    Raises:
        ValidationError: body is not JSON or does not match `model` (400)
    """

    async def parse_body(request: Request, identity: Identity = Depends(require_admin)) -> BodyT:
        raw = await request.body()
        try:
            return model.model_validate_json(raw)
        except PydanticValidationError as e:
            errors = validation_error_items(e.errors())
            raise ValidationError(
                detail=errors[0]["msg"],
                message="Validation failed",
                context={"model": model.__name__, "user_id": identity.user_id},
                errors=errors,
            )

    return parse_body


@router.put(
    "/{language}/{namespace}",
    response_model=ApiResponse[EditResultData],
    response_model_exclude_none=True,
    summary="Update translations",
)
async def update_translations(
    language: str,
    namespace: str,
    body: TranslationUpdateRequest = Depends(admin_body(TranslationUpdateRequest)),
    editor: TranslationEditor = Depends(get_translation_editor),
) -> ApiResponse[EditResultData]:
    result = await editor.update_translations(language, namespace, body.translations)
    return ApiResponse[EditResultData](
        message=editor.catalog.translate("translations.updated", count=result.updated_count),
        data=result,
    )


@router.post(
    "/{language}/{namespace}/add",
    response_model=ApiResponse[EditResultData],
    response_model_exclude_none=True,
    summary="Add translation keys",
)
async def add_translation_keys(
    language: str,
    namespace: str,
    body: TranslationUpdateRequest = Depends(admin_body(TranslationUpdateRequest)),
    editor: TranslationEditor = Depends(get_translation_editor),
) -> ApiResponse[EditResultData]:
    """Keys that already exist are left untouched and not counted."""
    result = await editor.add_translation_keys(language, namespace, body.translations)
    return ApiResponse[EditResultData](
        message=editor.catalog.translate("translations.added", count=result.added_count),
        data=result,
    )


@router.delete(
    "/{language}/{namespace}/delete",
    response_model=ApiResponse[EditResultData],
    response_model_exclude_none=True,
    summary="Delete translation keys",
)
async def delete_translation_keys(
    language: str,
    namespace: str,
    body: KeyDeletionRequest = Depends(admin_body(KeyDeletionRequest)),
    editor: TranslationEditor = Depends(get_translation_editor),
) -> ApiResponse[EditResultData]:
    result = await editor.delete_keys(language, namespace, body.keys)
    return ApiResponse[EditResultData](
        message=editor.catalog.translate("translations.deleted", count=result.deleted_count),
        data=result,
    )
