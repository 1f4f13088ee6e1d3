"""
Pydantic schema definitions for API payloads.

Wire names are camelCase to match the single-page client; the models
themselves use snake_case attributes and accept either spelling on input.
"""
