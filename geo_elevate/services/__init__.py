"""Service layer called by the API route handlers"""

from geo_elevate.services.session_service import SessionService

__all__ = ["SessionService"]
