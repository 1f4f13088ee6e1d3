"""
Top‑level package for the Social Network API.

This file makes ``social_network_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``social_network_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
