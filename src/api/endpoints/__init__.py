"""
API endpoint modules for the readiness assessment
"""

from src.api.endpoints import assessment, metadata

__all__ = ["assessment", "metadata"]
