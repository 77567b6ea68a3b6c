"""
Application package initializer.

The project is organised into logical pieces: ``core`` (configuration,
storage, security, errors), ``services`` (business logic), ``schemas``
(request/response models) and ``api`` (versioned routers).
"""

from .main import app, create_app  # noqa: F401
