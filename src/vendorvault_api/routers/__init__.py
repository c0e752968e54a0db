"""API routers package."""

from vendorvault_api.routers import (
    auth,
    inspector,
    notifications,
    railway_admin,
    station_manager,
    stations,
    uploads,
    vendor,
    verify,
)

__all__ = [
    "auth",
    "inspector",
    "notifications",
    "railway_admin",
    "station_manager",
    "stations",
    "uploads",
    "vendor",
    "verify",
]
