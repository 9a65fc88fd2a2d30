"""
Lexicon Backend: Translation Editor Service
===========================================

What:  Write-side business logic for the admin translation routes.
How:   Validate target bundle → re-read its JSON file → apply the edit →
       write the file back → refresh the in-memory catalog, all while
       holding the catalog's write lock.
Who:   Admin route handlers via `get_translation_editor`.

Edit semantics:
    update_translations   overwrite or insert every entry; count = entries sent
    add_translation_keys  insert only keys not already present; count = inserted
    delete_keys           remove keys that exist; count = removed

The file is re-read rather than trusting memory so edits made on disk by
translators since startup are not silently reverted.
"""

import logging
from typing import Callable, List, Tuple

from fastapi import Depends

from lexicon.exceptions import NotFoundError, ValidationError
from lexicon.schemas.translation import EditResultData, TranslationEntry
from lexicon.services.catalog import Bundle, TranslationCatalog, get_catalog
from lexicon.services.language_service import LanguageManagementService

logger = logging.getLogger(__name__)

# (bundle before) → (bundle after, affected count)
EditFn = Callable[[Bundle], Tuple[Bundle, int]]


class TranslationEditor:
    """Applies admin edits to resource bundles on disk and in memory."""

    def __init__(self, catalog: TranslationCatalog):
        self.catalog = catalog
        self.languages = LanguageManagementService(catalog)

    async def _apply(self, language: str, namespace: str, edit: EditFn) -> int:
        self.languages.validate_language(language)
        self.languages.validate_namespace(namespace, detail="Unsupported namespace")

        async with self.catalog.write_lock:
            current = await self.catalog.read_bundle_file(language, namespace)
            if current is None:
                raise NotFoundError(
                    message="Translation file not found",
                    context={"path": str(self.catalog.bundle_path(language, namespace))},
                )
            updated, count = edit(dict(current))
            await self.catalog.write_bundle(language, namespace, updated)

        return count

    async def update_translations(
        self, language: str, namespace: str, entries: List[TranslationEntry]
    ) -> EditResultData:
        def edit(bundle: Bundle) -> Tuple[Bundle, int]:
            for entry in entries:
                bundle[entry.key] = entry.value
            return bundle, len(entries)

        count = await self._apply(language, namespace, edit)
        logger.info("Updated %d keys in %s:%s", count, language, namespace)
        return EditResultData(language=language, namespace=namespace, updated_count=count)

    async def add_translation_keys(
        self, language: str, namespace: str, entries: List[TranslationEntry]
    ) -> EditResultData:
        def edit(bundle: Bundle) -> Tuple[Bundle, int]:
            added = 0
            for entry in entries:
                if entry.key not in bundle:
                    bundle[entry.key] = entry.value
                    added += 1
            return bundle, added

        count = await self._apply(language, namespace, edit)
        logger.info("Added %d of %d keys to %s:%s", count, len(entries), language, namespace)
        return EditResultData(language=language, namespace=namespace, added_count=count)

    async def delete_keys(
        self, language: str, namespace: str, keys: List[str]
    ) -> EditResultData:
        for key in keys:
            if not key or not key.strip():
                raise ValidationError(
                    detail="Each key must be a valid string",
                    message=self.catalog.translate("error"),
                    field="keys",
                )

        def edit(bundle: Bundle) -> Tuple[Bundle, int]:
            deleted = 0
            for key in keys:
                if key in bundle:
                    del bundle[key]
                    deleted += 1
            return bundle, deleted

        count = await self._apply(language, namespace, edit)
        logger.info("Deleted %d keys from %s:%s", count, language, namespace)
        return EditResultData(language=language, namespace=namespace, deleted_count=count)


def get_translation_editor(
    catalog: TranslationCatalog = Depends(get_catalog),
) -> TranslationEditor:
    """FastAPI dependency: an editor bound to the application's catalog."""
    return TranslationEditor(catalog)

