"""
Funnel.vc API Routers
FastAPI router modules for the founder-to-VC matching API.
"""
from funnel.api import health, matches, pitch, profile, vc

__all__ = [
    "health",
    "matches",
    "pitch",
    "profile",
    "vc",
]
