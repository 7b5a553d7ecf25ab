"""API routers, mounted under /api.

Includes routes for:
- /auth - registration, login, token refresh
- /tournaments, /tournament-types - public read model and entry
- /user - stats and free-point claims
- /admin - tournament management, resolution, manual sweep
"""
from prediction_arena.routers.admin import router as admin_router
from prediction_arena.routers.auth import router as auth_router
from prediction_arena.routers.tournaments import router as tournaments_router
from prediction_arena.routers.users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "tournaments_router",
    "users_router",
]
