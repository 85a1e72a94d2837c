"""Tests for the catalog HTTP handlers."""

import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

# Import create_app from main — it needs PROJECT_ROOT on sys.path
sys.path.insert(0, os.path.join(PROJECT_ROOT, "cmd", "broker"))
from main import create_app

from internal.broker.broker import Broker
from internal.broker.whitelist import Whitelist


def _client(broker, request_timeout=None):
    app = create_app(broker=broker)
    app.config["TESTING"] = True
    app.config["REQUEST_TIMEOUT"] = request_timeout
    return app.test_client()


@pytest.fixture
def client(make_directory):
    with _client(Broker(make_directory())) as c:
        yield c


# ── Health ────────────────────────────────────────────────────────────────────

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


# ── GET /v2/catalog ──────────────────────────────────────────────────────────

def test_catalog(client):
    resp = client.get("/v2/catalog")
    assert resp.status_code == 200
    services = resp.get_json()["services"]
    assert [s["name"] for s in services] == [
        "mongodb-atlas-aws", "mongodb-atlas-gcp", "mongodb-atlas-azure", "mongodb-atlas-tenant",
    ]
    aws = services[0]
    assert aws["bindable"] is True
    assert aws["plan_updateable"] is True
    assert [p["id"] for p in aws["plans"]] == [
        "aosb-cluster-plan-aws-m10", "aosb-cluster-plan-aws-m20", "aosb-cluster-plan-aws-m30",
    ]


def test_catalog_with_whitelist(make_directory):
    broker = Broker(make_directory(), Whitelist.from_mapping({"AWS": ["M20"]}))
    with _client(broker) as c:
        resp = c.get("/v2/catalog")
    services = resp.get_json()["services"]
    assert len(services) == 1
    assert [p["name"] for p in services[0]["plans"]] == ["M20"]


def test_catalog_directory_unavailable(make_directory):
    with _client(Broker(make_directory(fail_on={"GCP"}))) as c:
        resp = c.get("/v2/catalog")
    assert resp.status_code == 502
    data = resp.get_json()
    assert data["error"] == "DirectoryUnavailable"
    assert "services" not in data


# ── GET /v2/catalog/resolve ──────────────────────────────────────────────────

def test_resolve(client):
    resp = client.get("/v2/catalog/resolve", query_string={
        "service_id": "aosb-cluster-service-aws",
        "plan_id": "aosb-cluster-plan-aws-m20",
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["provider"] == "AWS"
    assert data["instance_size"] == "M20"


def test_resolve_invalid_service_id(client):
    resp = client.get("/v2/catalog/resolve", query_string={
        "service_id": "aosb-cluster-service-unknown",
        "plan_id": "aosb-cluster-plan-aws-m20",
    })
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "invalid-service-id", "description": "Invalid service ID"}


def test_resolve_invalid_plan_id(client):
    resp = client.get("/v2/catalog/resolve", query_string={
        "service_id": "aosb-cluster-service-aws",
        "plan_id": "aosb-cluster-plan-gcp-m10",
    })
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid-plan-id"


def test_resolve_missing_parameters(client):
    resp = client.get("/v2/catalog/resolve", query_string={"service_id": "aosb-cluster-service-aws"})
    assert resp.status_code == 400
    assert "plan_id" in resp.get_json()["description"]


def test_resolve_directory_unavailable(make_directory):
    with _client(Broker(make_directory(fail_on={"AWS"}))) as c:
        resp = c.get("/v2/catalog/resolve", query_string={
            "service_id": "aosb-cluster-service-gcp",
            "plan_id": "aosb-cluster-plan-gcp-m10",
        })
    assert resp.status_code == 502


# ── Request deadline ─────────────────────────────────────────────────────────

def test_catalog_request_timeout(make_directory):
    with _client(Broker(make_directory(delay=0.3)), request_timeout=0.1) as c:
        resp = c.get("/v2/catalog")
    assert resp.status_code == 504
    assert resp.get_json()["error"] == "RequestTimeout"


def test_resolve_request_timeout(make_directory):
    with _client(Broker(make_directory(delay=0.3)), request_timeout=0.1) as c:
        resp = c.get("/v2/catalog/resolve", query_string={
            "service_id": "aosb-cluster-service-azure",
            "plan_id": "aosb-cluster-plan-azure-m10",
        })
    assert resp.status_code == 504


def test_catalog_within_request_timeout(make_directory):
    with _client(Broker(make_directory()), request_timeout=5) as c:
        resp = c.get("/v2/catalog")
    assert resp.status_code == 200
