"""
Users API package.

Contains the account authentication routes, mounted under /users.
"""

from src.api.users.routes import router

__all__ = ["router"]
