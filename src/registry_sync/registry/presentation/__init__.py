"""Presentation layer for the registry bounded context."""

from registry.presentation.routes import router

__all__ = ["router"]
