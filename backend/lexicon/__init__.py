"""
Lexicon Backend: Application Package Initializer
================================================

What: Marks the `lexicon` directory as a Python package.
Who:  Imported by uvicorn (`lexicon.main:app`), the `lexicon` CLI and pytest.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │       Routes + Gates (API Layer)    │  ← HTTP concerns, auth dependencies
    ├─────────────────────────────────────┤
    │     Services (Business Logic)       │  ← statistics, missing keys, edits
    ├─────────────────────────────────────┤
    │        Schemas (API Contracts)      │  ← Pydantic envelopes and bodies
    ├─────────────────────────────────────┤
    │   Translation Catalog (Storage)     │  ← locales/<lang>/<ns>.json bundles
    └─────────────────────────────────────┘

    Routes never touch the filesystem; they call services, which read and
    write through the catalog held on `app.state`.
"""

__version__ = "1.0.0"
