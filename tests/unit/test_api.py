"""
# ==============================================================================
# Module: tests/unit/test_api.py
# ==============================================================================
# Purpose: Unit tests for the FastAPI service
#
# Tests:
#   - Health and readiness probes
#   - PhenoGrid scoring endpoint responses and error mapping
#   - Config endpoint
# ==============================================================================
"""
import pytest

# Skip if fastapi/pydantic not available
pytest.importorskip("fastapi")
pytest.importorskip("pydantic")

from fastapi.testclient import TestClient

from phenosim.api.main import app, app_state
from phenosim.config import reset_hyperparameter_manager


# ==============================================================================
# Fixtures
# ==============================================================================
@pytest.fixture(autouse=True)
def clean_state():
    """Start every test with a fresh pipeline and hyperparameters."""
    reset_hyperparameter_manager()
    app_state.pipeline = None
    app_state.hyperparameters = None
    yield
    reset_hyperparameter_manager()
    app_state.pipeline = None
    app_state.hyperparameters = None


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def phenogrid_request():
    return {
        "query_terms": [
            {"id": "HP:0000001", "label": "Q1"},
            {"id": "HP:0000002", "label": "Q2"},
        ],
        "phenotype_matches": {
            "human": [
                {"query_id": "HP:0000001", "match_id": "HP:0000001", "match_label": "Q1", "score": 3.0},
                {"query_id": "HP:0000002", "match_id": "HP:0000010", "match_label": "H10", "score": 2.0},
            ],
            "mouse": [
                {"query_id": "HP:0000001", "match_id": "MP:0000001", "match_label": "M1", "score": 2.0},
            ],
        },
        "models": [
            {
                "model_type": "disease",
                "model_id": "d1",
                "organism": "human",
                "entity_id": "OMIM:1",
                "entity_label": "Disease 1",
                "phenotype_ids": ["HP:0000001", "HP:0000010"],
            },
            {
                "model_type": "gene",
                "model_id": "m1",
                "organism": "mouse",
                "entity_id": "MGI:1",
                "entity_label": "Gene1",
                "phenotype_ids": ["MP:0000001"],
                "human_gene_symbol": "GENE1",
            },
        ],
    }


# ==============================================================================
# Health Endpoints
# ==============================================================================
class TestHealthEndpoints:
    """Test health and readiness probes."""

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_ready(self, client):
        resp = client.get("/ready")
        assert resp.status_code == 200
        assert resp.json() == {"ready": True, "pipeline_loaded": True}

    def test_not_ready_without_startup(self):
        app_state.is_ready = False
        resp = TestClient(app).get("/ready")
        assert resp.status_code == 503
        assert resp.json()["error"] == "Service not ready"


# ==============================================================================
# PhenoGrid Endpoint
# ==============================================================================
class TestPhenoGridEndpoint:
    """Test POST /api/v1/phenogrid."""

    def test_score(self, client, phenogrid_request):
        resp = client.post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 200
        data = resp.json()

        grid = data["phenogrid"]
        assert grid["queryTermIds"] == ["HP:0000001", "HP:0000002"]
        assert [g["organismTaxon"]["id"] for g in grid["groups"]] == [
            "NCBITaxon:9606", "NCBITaxon:10090",
        ]
        disease = grid["groups"][0]["matches"][0]
        assert disease["entityId"] == "OMIM:1"
        assert disease["entityType"] == "disease"
        assert disease["integerScore"] == 75
        assert [s["modelId"] for s in data["model_scores"]] == ["d1", "m1"]
        assert data["traces"] is None

    def test_include_trace(self, client, phenogrid_request):
        phenogrid_request["include_trace"] = True
        data = client.post("/api/v1/phenogrid", json=phenogrid_request).json()
        assert [t["organism"] for t in data["traces"]] == ["human", "mouse"]

    def test_lazy_pipeline(self, phenogrid_request):
        """The pipeline is built on first request when startup did not run."""
        resp = TestClient(app).post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 200
        assert app_state.pipeline is not None

    def test_empty_query_rejected(self, client, phenogrid_request):
        phenogrid_request["query_terms"] = []
        resp = client.post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 422

    def test_invalid_phenotypes_rejected(self, client, phenogrid_request):
        phenogrid_request["query_terms"] = [{"id": "HP:0000001"}, {"id": "  "}]
        resp = client.post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 422
        assert "Invalid query phenotypes" in resp.json()["error"]

    def test_unknown_organism_rejected(self, client, phenogrid_request):
        phenogrid_request["phenotype_matches"]["yeast"] = []
        resp = client.post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 422
        assert resp.json()["path"] == "/api/v1/phenogrid"

    def test_negative_score_rejected(self, client, phenogrid_request):
        phenogrid_request["phenotype_matches"]["human"][0]["score"] = -1.0
        resp = client.post("/api/v1/phenogrid", json=phenogrid_request)
        assert resp.status_code == 422


# ==============================================================================
# Config Endpoint
# ==============================================================================
class TestConfigEndpoint:
    """Test GET /api/v1/config."""

    def test_get_config(self, client):
        resp = client.get("/api/v1/config")
        assert resp.status_code == 200
        data = resp.json()
        assert data["values"]["scoring"]["grid_id"] == "hiPhive"
        assert {s["name"] for s in data["specs"]["validation"]} == {
            "strict_hpo_format", "min_phenotypes",
        }
        assert data["pipeline"]["max_workers"] == 4

    def test_config_file_loaded_at_startup(self, tmp_path, monkeypatch):
        path = tmp_path / "scoring.yaml"
        path.write_text("scoring:\n  grid_id: custom-grid\n")
        monkeypatch.setenv("PHENOSIM_CONFIG", str(path))

        with TestClient(app) as client:
            data = client.get("/api/v1/config").json()
        assert data["values"]["scoring"]["grid_id"] == "custom-grid"
        assert data["pipeline"]["grid_id"] == "custom-grid"
