# Schemas package init
"""
Lexicon Backend: API Schemas
============================

What:  Pydantic models for request bodies and response envelopes.
       See translation.py for the envelope shapes.
"""
