"""
Pass rendering and gate verification.
"""
from io import BytesIO
from urllib.parse import parse_qs, urlsplit

import pytest
from PIL import Image

from conftest import COMMUNITY_A, COMMUNITY_B
from gatehouse.core.exceptions import ResourceNotFoundError
from gatehouse.models.enums import VisitorStatus
from gatehouse.services.visitor.gate_verifier import GateVerifier
from gatehouse.services.visitor.pass_issuer import PassIssuer, extract_visitor_id


@pytest.fixture
def issuer():
    return PassIssuer(base_url="https://gate.example.com/", content_id_domain="gatehouse")


def test_issue_renders_square_png(issuer, make_user, make_visitor):
    visitor = make_visitor(make_user())

    visitor_pass = issuer.issue(visitor)

    image = Image.open(BytesIO(visitor_pass.image))
    assert image.format == "PNG"
    assert image.size == (300, 300)
    assert visitor_pass.content_id == f"qr-{visitor.id}@gatehouse"


def test_token_embeds_id_and_tenant(issuer):
    token = issuer.token_for("visitor-1", COMMUNITY_A)

    parts = urlsplit(token)
    assert token.startswith("https://gate.example.com/api/v1/gatekeeper/scan?")
    assert parse_qs(parts.query) == {"id": ["visitor-1"], "tenantId": [COMMUNITY_A]}


@pytest.mark.parametrize("token,expected", [
    ("https://gate.example.com/api/v1/gatekeeper/scan?id=abc&tenantId=t", "abc"),
    ("/api/v1/gatekeeper/scan?tenantId=t&id=abc", "abc"),
    ("  abc  ", "abc"),
    ("https://gate.example.com/api/v1/gatekeeper/scan?tenantId=t", None),
    ("", None),
    (None, None),
])
def test_extract_visitor_id(token, expected):
    assert extract_visitor_id(token) == expected


def test_issue_then_verify_round_trip(db, issuer, make_user, make_visitor):
    visitor = make_visitor(make_user())

    token = issuer.issue(visitor).token
    resolved = GateVerifier(db).verify(COMMUNITY_A, token)

    assert resolved.id == visitor.id
    assert resolved.status == VisitorStatus.PENDING


def test_verify_accepts_bare_id(db, make_user, make_visitor):
    visitor = make_visitor(make_user())
    assert GateVerifier(db).verify(COMMUNITY_A, visitor.id).id == visitor.id


def test_verify_never_crosses_tenants(db, issuer, make_user, make_visitor):
    visitor_b = make_visitor(make_user(community_id=COMMUNITY_B))
    token = issuer.issue(visitor_b).token

    with pytest.raises(ResourceNotFoundError):
        GateVerifier(db).verify(COMMUNITY_A, token)
    with pytest.raises(ResourceNotFoundError):
        GateVerifier(db).verify(COMMUNITY_A, visitor_b.id)


def test_verify_rejects_token_without_id(db):
    with pytest.raises(ResourceNotFoundError):
        GateVerifier(db).verify(COMMUNITY_A, "https://gate.example.com/api/v1/gatekeeper/scan")
