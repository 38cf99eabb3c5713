"""
Gatehouse: visitor access workflow for gated communities.
"""

__version__ = "1.0.0"
