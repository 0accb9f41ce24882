"""Tests for error handling in the BasketRec API.

Tests the scenarios where no model can be served: missing purchase data and
purchase data that cannot be turned into a model.
"""

from pathlib import Path

from fastapi.testclient import TestClient

from basketrec.api.exceptions import (
    BasketRecException,
    ModelLoadError,
    ModelNotFoundError,
)
from basketrec.api import main as api_main
from basketrec.api.main import DATA_PATH_ENV, create_app


def test_model_not_found_error(tmp_path: Path):
    """Test that missing purchase data returns 503 Service Unavailable."""
    app = create_app(data_path=str(tmp_path / "missing.csv"))

    with TestClient(app) as client:
        response = client.get("/recommend/whole milk?top_n=5")

    assert response.status_code == 503
    data = response.json()

    assert data["error"] == "ModelNotFoundError"
    assert "Model not available" in data["message"]
    assert data["details"]["data_path"] == str(tmp_path / "missing.csv")


def test_model_load_error(tmp_path: Path):
    """Test that unusable purchase data returns 500 with the cause."""
    bad_csv = tmp_path / "bad.csv"
    bad_csv.write_text("id,name\n1,test\n")
    app = create_app(data_path=str(bad_csv))

    with TestClient(app) as client:
        response = client.get("/recommend/whole milk")

    assert response.status_code == 500
    data = response.json()

    assert data["error"] == "ModelLoadError"
    assert data["details"]["error_type"] == "ValueError"
    assert "missing required columns" in data["details"]["error"]


def test_unexpected_build_failure_returns_500(tmp_path: Path, monkeypatch):
    """Test that any builder failure keeps the service up and answers 500."""
    csv_path = tmp_path / "groceries.csv"
    csv_path.write_text("Member_number,Date,itemDescription\n1,01-01-2015,soda\n")

    def failing_build(data_path):
        raise RuntimeError("out of memory")

    monkeypatch.setattr(api_main, "train_affinity_model", failing_build)
    app = create_app(data_path=str(csv_path))

    with TestClient(app) as client:
        ping = client.get("/ping")
        response = client.get("/recommend/soda")

    assert ping.status_code == 200
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "ModelLoadError"
    assert data["details"]["error_type"] == "RuntimeError"


def test_multiple_errors_consistency(tmp_path: Path):
    """Test that repeated failures return the same response structure."""
    app = create_app(data_path=str(tmp_path / "missing.csv"))

    with TestClient(app) as client:
        responses = [client.get(f"/recommend/{p}") for p in ["soda", "beef", "curd"]]

    assert {r.status_code for r in responses} == {503}
    for response in responses:
        assert set(response.json()) == {"error", "message", "details"}


def test_health_check_not_affected_by_model_errors(tmp_path: Path):
    """Test that /ping works even if the model is missing."""
    app = create_app(data_path=str(tmp_path / "missing.csv"))

    with TestClient(app) as client:
        response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_endpoint_with_missing_model(tmp_path: Path):
    """Test that /status reports no model instead of failing."""
    app = create_app(data_path=str(tmp_path / "missing.csv"))

    with TestClient(app) as client:
        response = client.get("/status")

    assert response.status_code == 200
    data = response.json()

    assert data["model_loaded"] is False
    assert data["timestamp_last_loaded"] is None
    assert data["num_products"] == 0


def test_data_path_from_environment(tmp_path: Path, monkeypatch):
    """Test that the data path defaults to the environment variable."""
    missing = str(tmp_path / "from_env.csv")
    monkeypatch.setenv(DATA_PATH_ENV, missing)

    app = create_app()

    assert app.state.data_path == missing


def test_exception_details():
    """Test the fields carried by the custom exceptions."""
    not_found = ModelNotFoundError("data/groceries.csv")
    assert isinstance(not_found, BasketRecException)
    assert not_found.status_code == 503
    assert not_found.details == {"data_path": "data/groceries.csv"}

    load_error = ModelLoadError("data/groceries.csv", OSError("disk error"))
    assert load_error.status_code == 500
    assert load_error.details["error_type"] == "OSError"
    assert "disk error" in load_error.message
