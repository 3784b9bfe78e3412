"""API routers for the VOM Admin application."""

from vom_admin.routers import admin, auth, members  # noqa: F401
