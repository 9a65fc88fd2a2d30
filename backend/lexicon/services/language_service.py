"""
Lexicon Backend: Language Management Service
============================================

What:  Read-side business logic behind the translation route table.
How:   Pure functions over a TranslationCatalog; no HTTP types here, so the
       CLI reuses the same service for its reports.
Who:   Route handlers (via `get_language_service`) and the `lexicon` CLI.

Operations:
    get_supported_languages()   [{code, name}]
    get_available_namespaces()  [namespace, ...]
    get_translations(lang, ns)  one bundle
    get_all_translations(lang)  {namespace: bundle}
    get_statistics()            {lang: {ns: NamespaceStatistics}}
    find_missing(reference)     {lang: {ns: [keys]}}
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends

from lexicon.config import settings
from lexicon.exceptions import ValidationError
from lexicon.schemas.translation import LanguageInfo, NamespaceStatistics
from lexicon.services.catalog import TranslationCatalog, get_catalog

logger = logging.getLogger(__name__)


class LanguageManagementService:
    """
    Business logic for language and namespace metadata.

    Validation errors carry the same wording the frontend already matches on:
    "Unsupported language" and "Invalid namespace" (the admin editor passes
    "Unsupported namespace" instead).
    """

    def __init__(self, catalog: TranslationCatalog, reference_language: Optional[str] = None):
        self.catalog = catalog
        self.reference_language = reference_language or settings.reference_language

    # ── Metadata ──────────────────────────────────────────────────────────

    def get_supported_languages(self) -> List[LanguageInfo]:
        names = settings.language_names
        return [
            LanguageInfo(code=code, name=names.get(code, code))
            for code in self.catalog.languages
        ]

    def get_available_namespaces(self) -> List[str]:
        return list(self.catalog.namespaces)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_language(self, language: str) -> None:
        if not self.catalog.has_language(language):
            raise ValidationError(
                detail="Unsupported language",
                message=self.catalog.translate("error"),
                field="language",
                context={"language": language},
            )

    def validate_namespace(self, namespace: str, detail: str = "Invalid namespace") -> None:
        if not self.catalog.has_namespace(namespace):
            raise ValidationError(
                detail=detail,
                message=self.catalog.translate("error"),
                field="namespace",
                context={"namespace": namespace},
            )

    # ── Bundles ───────────────────────────────────────────────────────────

    def get_translations(self, language: str, namespace: str) -> Dict[str, Any]:
        """
        Key/value pairs of one language restricted to one namespace.

        Raises:
            ValidationError: unknown language (checked first) or namespace
        """
        self.validate_language(language)
        self.validate_namespace(namespace)
        return self.catalog.bundle(language, namespace)

    def get_all_translations(self, language: str) -> Dict[str, Dict[str, Any]]:
        """Bundles of every namespace for one language, keyed by namespace."""
        self.validate_language(language)
        return {
            namespace: self.catalog.bundle(language, namespace)
            for namespace in self.catalog.namespaces
        }

    # ── Reports ───────────────────────────────────────────────────────────

    def get_statistics(self) -> Dict[str, Dict[str, NamespaceStatistics]]:
        """Top-level key counts per (language, namespace)."""
        stats: Dict[str, Dict[str, NamespaceStatistics]] = {}
        for language in self.catalog.languages:
            stats[language] = {}
            for namespace in self.catalog.namespaces:
                key_count = len(self.catalog.keys(language, namespace))
                stats[language][namespace] = NamespaceStatistics(
                    key_count=key_count,
                    translated=key_count > 0,
                )
        return stats

    def find_missing(self, reference_language: Optional[str] = None) -> Dict[str, Dict[str, List[str]]]:
        """
        Keys present in the reference language but absent elsewhere.

        Every non-reference language gets an entry (possibly empty); a
        namespace is listed only when it has at least one missing key.
        Keys are reported in the reference bundle's order.
        """
        reference = reference_language or self.reference_language
        reference_keys = {
            namespace: self.catalog.keys(reference, namespace)
            for namespace in self.catalog.namespaces
        }

        missing: Dict[str, Dict[str, List[str]]] = {}
        for language in self.catalog.languages:
            if language == reference:
                continue
            missing[language] = {}
            for namespace in self.catalog.namespaces:
                present = set(self.catalog.keys(language, namespace))
                absent = [key for key in reference_keys[namespace] if key not in present]
                if absent:
                    missing[language][namespace] = absent

        total = sum(len(keys) for per_ns in missing.values() for keys in per_ns.values())
        logger.debug("Missing-key scan against '%s': %d keys missing", reference, total)
        return missing


def get_language_service(
    catalog: TranslationCatalog = Depends(get_catalog),
) -> LanguageManagementService:
    """FastAPI dependency: a service bound to the application's catalog."""
    return LanguageManagementService(catalog)
