"""
Visitor access workflow services.
"""

from gatehouse.services.visitor.gate_verifier import GateVerifier
from gatehouse.services.visitor.pass_issuer import PassIssuer, VisitorPass, extract_visitor_id
from gatehouse.services.visitor.visitor_notification_service import VisitorNotificationService
from gatehouse.services.visitor.visitor_pass_mailer import VisitorPassMailer
from gatehouse.services.visitor.visitor_service import VisitorService
from gatehouse.services.visitor.visitor_stats_service import VisitorStatsService

__all__ = [
    "GateVerifier",
    "PassIssuer",
    "VisitorPass",
    "VisitorNotificationService",
    "VisitorPassMailer",
    "VisitorService",
    "VisitorStatsService",
    "extract_visitor_id",
]
