"""
Application package initializer.

The project is organised by layer: ``core`` holds configuration,
persistence and security primitives, ``schemas`` the pydantic payloads,
``services`` the business logic for each domain (accounts, profiles,
posts, follows, feed and search) and ``api`` the versioned HTTP routers.
"""

from .main import app, create_app  # noqa: F401
