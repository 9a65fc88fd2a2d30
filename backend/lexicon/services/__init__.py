# Services package init
"""
Lexicon Backend: Services Layer
===============================

What:  Business logic sitting between routes (HTTP) and the resource bundles.
How:   Services take plain values, apply the rules and return schema models
       or raise LexiconError subclasses. Routes receive them through
       FastAPI dependency injection; the CLI constructs them directly.

Service Inventory:
    - TranslationCatalog: loads bundles, serves lookups, persists edits
    - LanguageManagementService: language/namespace metadata and reports
    - TranslationEditor: admin update/add/delete on bundle files
"""
