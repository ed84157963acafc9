"""
API v1 package: reservation, ticket, seat map and schedule routers
"""

from . import endpoints

__all__ = ["endpoints"]
