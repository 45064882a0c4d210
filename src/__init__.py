"""
Inflecto Readiness - AI Readiness Assessment Backend

Serves the persona-based AI readiness quiz over a WebSocket, scoring
answers into a maturity stage for downstream report generation.
"""

__version__ = "0.1.0"
__author__ = "Inflecto Technologies"
