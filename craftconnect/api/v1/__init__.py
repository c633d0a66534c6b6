"""
API v1 package.

Contains versioned API routes for the CraftConnect onboarding API.
"""

from craftconnect.api.v1.routes import router

__all__ = ["router"]
