"""
Lexicon Backend: Translation Catalog
====================================

What:  In-memory store of i18next-style resource bundles plus the translator.
How:   Every `<locales_dir>/<lang>/<ns>.json` file for the configured languages
       and namespaces is read once at startup. Reads are served from memory;
       admin edits rewrite the JSON file with aiofiles and swap the in-memory
       bundle under a lock.
Who:   Built by `create_app()` and stored on `app.state.catalog`; the CLI
       builds its own instance.

Directory Layout:
    locales/
    ├── en/
    │   ├── common.json
    │   └── booking.json
    └── lo/
        ├── common.json
        └── booking.json

Translator semantics (`translate`):
    - "booking:confirm" selects the `booking` namespace, bare keys use the
      default namespace
    - dotted keys walk nested objects ("auth.adminOnly")
    - lookup order: requested language, then the fallback language
    - {{name}} placeholders are filled from keyword options
    - an unresolved key is returned unchanged
"""

import asyncio
import contextlib
import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import aiofiles
import aiofiles.os
from starlette.requests import Request

from lexicon.config import Settings, settings as default_settings
from lexicon.exceptions import TranslationStorageError
from lexicon.middleware.language import language_var

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")

Bundle = Dict[str, Any]


class TranslationCatalog:
    """
    Holds every loaded resource bundle keyed by (language, namespace).

    Attributes:
        locales_dir:        Root directory the bundles are read from and written to
        languages:          Supported language codes, in configured order
        namespaces:         Available namespaces, in configured order
        default_language:   Used by `translate` when no language is negotiated
        fallback_language:  Consulted when a key is missing in the requested language
        default_namespace:  Namespace for keys without an "ns:" prefix
    """

    def __init__(
        self,
        locales_dir: str | Path,
        languages: Iterable[str],
        namespaces: Iterable[str],
        default_language: str = "lo",
        fallback_language: str = "en",
        default_namespace: str = "common",
    ):
        self.locales_dir = Path(locales_dir).resolve()
        self.languages: List[str] = list(languages)
        self.namespaces: List[str] = list(namespaces)
        self.default_language = default_language
        self.fallback_language = fallback_language
        self.default_namespace = default_namespace
        self._bundles: Dict[Tuple[str, str], Bundle] = {}
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "TranslationCatalog":
        """Build and load a catalog from application settings."""
        config = config or default_settings
        catalog = cls(
            locales_dir=config.locales_dir,
            languages=config.supported_languages_list,
            namespaces=config.namespaces_list,
            default_language=config.default_language,
            fallback_language=config.fallback_language,
            default_namespace=config.default_namespace,
        )
        catalog.load()
        return catalog

    # ── Loading ───────────────────────────────────────────────────────────

    def bundle_path(self, language: str, namespace: str) -> Path:
        return self.locales_dir / language / f"{namespace}.json"

    def load(self) -> None:
        """
        Read every configured bundle from disk, replacing what is in memory.

        A missing file is an empty bundle. A file that is not a JSON object
        raises TranslationStorageError: serving a half-loaded catalog would
        make the statistics and missing-key reports lie.
        """
        bundles: Dict[Tuple[str, str], Bundle] = {}
        for language in self.languages:
            for namespace in self.namespaces:
                path = self.bundle_path(language, namespace)
                if not path.is_file():
                    logger.debug("No bundle for %s:%s at %s", language, namespace, path)
                    bundles[(language, namespace)] = {}
                    continue
                bundles[(language, namespace)] = self._parse(
                    path.read_text(encoding="utf-8"), path
                )

        self._bundles = bundles
        logger.info(
            "Translation catalog loaded from %s: %d languages, %d namespaces, %d non-empty bundles",
            self.locales_dir,
            len(self.languages),
            len(self.namespaces),
            self.loaded_bundle_count,
        )

    @staticmethod
    def _parse(raw: str, path: Path) -> Bundle:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TranslationStorageError(
                message="A translation file could not be parsed.",
                context={"path": str(path), "error": str(e)},
            )
        if not isinstance(data, dict):
            raise TranslationStorageError(
                message="A translation file does not contain a JSON object.",
                context={"path": str(path), "type": type(data).__name__},
            )
        return data

    # ── Reads ─────────────────────────────────────────────────────────────

    def has_language(self, language: str) -> bool:
        return language in self.languages

    def has_namespace(self, namespace: str) -> bool:
        return namespace in self.namespaces

    def bundle(self, language: str, namespace: str) -> Bundle:
        """Return a copy of one bundle (empty for unknown pairs)."""
        return copy.deepcopy(self._bundles.get((language, namespace), {}))

    def keys(self, language: str, namespace: str) -> List[str]:
        """Top-level keys of one bundle, in file order."""
        return list(self._bundles.get((language, namespace), {}).keys())

    @property
    def loaded_bundle_count(self) -> int:
        return sum(1 for bundle in self._bundles.values() if bundle)

    # ── Translator ────────────────────────────────────────────────────────

    def translate(
        self,
        key: str,
        language: Optional[str] = None,
        namespace: Optional[str] = None,
        **options: Any,
    ) -> str:
        """
        Resolve a translation key to a string.

        Args:
            key:        "key", "nested.key" or "namespace:key"
            language:   Explicit language; defaults to the negotiated request
                        language, then the catalog default
            namespace:  Explicit namespace; overridden by an "ns:" prefix
            options:    Values for {{placeholder}} interpolation

        Returns:
            The translated, interpolated string, or `key` when unresolved.
        """
        ns = namespace or self.default_namespace
        lookup_key = key
        if ":" in key:
            prefix, rest = key.split(":", 1)
            if self.has_namespace(prefix):
                ns, lookup_key = prefix, rest

        requested = language or language_var.get() or self.default_language
        for candidate in dict.fromkeys((requested, self.fallback_language)):
            value = self._lookup(candidate, ns, lookup_key)
            if isinstance(value, str):
                return self._interpolate(value, options)
        return key

    def _lookup(self, language: str, namespace: str, key: str) -> Any:
        node: Any = self._bundles.get((language, namespace), {})
        if key in node:
            return node[key]
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    @staticmethod
    def _interpolate(template: str, options: Dict[str, Any]) -> str:
        if not options:
            return template

        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            return str(options[name]) if name in options else match.group(0)

        return _PLACEHOLDER.sub(substitute, template)

    # ── Writes ────────────────────────────────────────────────────────────

    async def read_bundle_file(self, language: str, namespace: str) -> Optional[Bundle]:
        """Read one bundle straight from disk; None when the file is absent."""
        path = self.bundle_path(language, namespace)
        if not path.is_file():
            return None
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            logger.error("Failed to read bundle %s: %s", path, str(e))
            raise TranslationStorageError(
                message="Failed to read translation file.",
                context={"path": str(path), "os_error": str(e)},
            )
        return self._parse(raw, path)

    async def write_bundle(self, language: str, namespace: str, data: Bundle) -> None:
        """
        Persist one bundle to its JSON file and replace it in memory.

        Format matches what the frontend tooling produces: 2-space indent,
        UTF-8 with non-ASCII characters kept literal (Lao script stays readable).

        The JSON goes to a sibling temp file that is then renamed over the
        bundle, so a failed write leaves the previous file intact.
        """
        path = self.bundle_path(language, namespace)
        tmp_path = path.with_name(f".{path.name}.tmp")
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.flush()
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            logger.error("Failed to write bundle %s: %s", path, str(e))
            with contextlib.suppress(OSError):
                await aiofiles.os.remove(tmp_path)
            raise TranslationStorageError(
                message="Failed to save translations. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )
        self._bundles[(language, namespace)] = copy.deepcopy(data)
        logger.info("Bundle %s:%s written (%d keys)", language, namespace, len(data))

    @property
    def write_lock(self) -> asyncio.Lock:
        """Serializes read-modify-write cycles on bundle files."""
        return self._write_lock


def get_catalog(request: Request) -> TranslationCatalog:
    """FastAPI dependency: the catalog attached to the running application."""
    return request.app.state.catalog
