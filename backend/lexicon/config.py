"""
Lexicon Backend: Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types and ranges, and exposes a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at import time; checked again in the app lifespan.

List-valued settings (languages, namespaces, CORS origins) are stored as
comma-separated strings so they can be set from a single env var, and are
exposed as lists through `*_list` properties.
"""

from pathlib import Path
from typing import Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Bundles shipped with the package; deployments usually point LOCALES_DIR
# at a writable volume instead.
DEFAULT_LOCALES_DIR = Path(__file__).resolve().parent / "locales"

# Placeholder secret; startup logs an error while it is still in use.
INSECURE_JWT_SECRET = "your-secret-key"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments MUST
    override JWT_SECRET and CORS_ORIGINS.
    """

    # ── Environment ───────────────────────────────────────────────────────
    environment: str = Field(default="development")

    # ── Translations ──────────────────────────────────────────────────────
    # What: Root of the i18next-style resource tree: <locales_dir>/<lang>/<ns>.json
    locales_dir: str = Field(default=str(DEFAULT_LOCALES_DIR))

    # What: Languages the catalog loads and the negotiator accepts
    supported_languages: str = Field(default="en,lo")

    # What: Language used when a request expresses no usable preference
    default_language: str = Field(default="lo")

    # What: Language consulted when a key is missing in the requested one
    fallback_language: str = Field(default="en")

    # What: Language whose keys define "complete" for the missing-key report
    reference_language: str = Field(default="en")

    namespaces: str = Field(default="common,booking,analytics,reviews,loyalty")
    default_namespace: str = Field(default="common")

    # ── Identity Gate ─────────────────────────────────────────────────────
    # What: Shared secret and algorithm used to verify bearer tokens
    jwt_secret: str = Field(default=INSECURE_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")

    # What: Role required by admin-gated routes
    admin_role: str = Field(default="superadmin")

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8080"
    )

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window applied to /api paths
    rate_limit_requests: int = Field(default=10_000, ge=10, le=100_000)
    rate_limit_window: int = Field(default=900, ge=1, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("default_language", "fallback_language", "reference_language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip().lower()

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def supported_languages_list(self) -> List[str]:
        return [code.lower() for code in self._split(self.supported_languages)]

    @property
    def namespaces_list(self) -> List[str]:
        return self._split(self.namespaces)

    @property
    def cors_origins_list(self) -> List[str]:
        return self._split(self.cors_origins)

    @property
    def language_names(self) -> Dict[str, str]:
        """Display names for known language codes; unknown codes show as-is."""
        return {"en": "English", "lo": "Lao"}

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-sensitive settings were overridden.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.jwt_secret == INSECURE_JWT_SECRET:
            errors.append(
                "JWT_SECRET is still the development placeholder. "
                "Set it to the secret used by the token issuer."
            )
        if self.default_language not in self.supported_languages_list:
            errors.append(
                f"DEFAULT_LANGUAGE '{self.default_language}' is not in "
                f"SUPPORTED_LANGUAGES ({self.supported_languages})."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
