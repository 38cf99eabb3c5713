"""
Visitor schemas package.
"""

from gatehouse.schemas.visitor.visitor_base import VisitorCreate, VisitorStatusUpdate
from gatehouse.schemas.visitor.visitor_response import (
    VisitorCreatedResponse,
    VisitorEnvelope,
    VisitorResponse,
    VisitorStats,
)

__all__ = [
    "VisitorCreate",
    "VisitorStatusUpdate",
    "VisitorResponse",
    "VisitorEnvelope",
    "VisitorCreatedResponse",
    "VisitorStats",
]
