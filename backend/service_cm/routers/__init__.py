"""
API routers for the Service CM backend.
"""

from service_cm.routers import checkout, commit, tags

__all__ = ["tags", "checkout", "commit"]
