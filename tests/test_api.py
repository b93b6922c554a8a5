import os
from pathlib import Path

import pytest

db_path = Path("tests/test_api.db")
if db_path.exists():
    db_path.unlink()

os.environ["TEX_SYNC_DATABASE_URL"] = "sqlite:///tests/test_api.db"


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from tex_sync.web.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def project_id(client, tex_project):
    response = client.post("/api/projects", json={"name": "Paper", "pdf_path": str(tex_project["pdf"])})
    return response.json()["id"]


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestProjects:
    def test_create_project(self, client, tex_project):
        response = client.post("/api/projects", json={"name": "Paper", "pdf_path": str(tex_project["pdf"])})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Paper"
        assert len(data["id"]) == 26

    def test_list_projects(self, client, project_id):
        response = client.get("/api/projects")
        assert response.status_code == 200
        assert project_id in [p["id"] for p in response.json()]

    def test_update_project(self, client, project_id):
        response = client.patch(f"/api/projects/{project_id}", json={"name": "Renamed"})
        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"

    def test_update_without_fields(self, client, project_id):
        response = client.patch(f"/api/projects/{project_id}", json={})
        assert response.status_code == 400

    def test_delete_project(self, client, project_id):
        response = client.delete(f"/api/projects/{project_id}")
        assert response.status_code == 200

        get_resp = client.get(f"/api/projects/{project_id}")
        assert get_resp.status_code == 404


class TestSyncTeXForward:
    def test_forward(self, client, project_id, tex_project):
        response = client.post(
            f"/api/synctex/{project_id}/forward",
            json={"filename": str(tex_project["main"]), "line": 3},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["x"] == pytest.approx(72, abs=1e-4)
        assert data["y"] == pytest.approx(100, abs=1e-4)

    def test_forward_get(self, client, project_id, tex_project):
        response = client.get(
            f"/api/synctex/{project_id}/forward",
            params={"line": 5, "file": str(tex_project["main"])},
        )
        assert response.status_code == 200
        assert response.json()["y"] == pytest.approx(150, abs=1e-4)

    def test_forward_unknown_file(self, client, project_id, tex_project):
        other = tex_project["dir"] / "other.tex"
        other.write_text("")
        response = client.post(f"/api/synctex/{project_id}/forward", json={"filename": str(other), "line": 3})
        assert response.status_code == 404

    def test_project_not_found(self, client):
        response = client.post("/api/synctex/01ARZ3NDEKTSV4RRFFQ69G5FAV/forward", json={"filename": "a", "line": 1})
        assert response.status_code == 404

    def test_synctex_not_found(self, client, project_id, tex_project):
        (tex_project["dir"] / "main.synctex").unlink()
        response = client.post(
            f"/api/synctex/{project_id}/forward",
            json={"filename": str(tex_project["main"]), "line": 3},
        )
        assert response.status_code == 404

    def test_synctex_parse_error(self, client, project_id, tex_project):
        (tex_project["dir"] / "main.synctex").write_text("garbage\n")
        response = client.post(
            f"/api/synctex/{project_id}/forward",
            json={"filename": str(tex_project["main"]), "line": 3},
        )
        assert response.status_code == 500


class TestSyncTeXReverse:
    def test_reverse(self, client, project_id, tex_project):
        response = client.post(f"/api/synctex/{project_id}/reverse", json={"page": 2, "x": 72, "y": 45})
        assert response.status_code == 200
        data = response.json()
        assert data == {"file": str(tex_project["chapter"]), "line": 2, "column": 0}

    def test_reverse_empty_page(self, client, project_id):
        response = client.post(f"/api/synctex/{project_id}/reverse", json={"page": 9, "x": 72, "y": 45})
        assert response.status_code == 404


class TestSyncTeXInfo:
    def test_info(self, client, project_id, tex_project):
        response = client.get(f"/api/synctex/{project_id}/info")
        assert response.status_code == 200
        data = response.json()
        assert data["version"] == "1"
        assert data["page_count"] == 2
        assert data["inputs"] == [str(tex_project["main"]), str(tex_project["chapter"])]


class TestConfig:
    def test_get_config(self, client):
        response = client.get("/api/config")
        assert response.status_code == 200
        data = response.json()
        assert "fallback_encodings" in data
        assert "utf-8" in data["default_encodings"]

    def test_update_config(self, client):
        response = client.patch("/api/config", json={"log_level": "debug", "resolve_input_path": False})
        assert response.status_code == 200

        data = client.get("/api/config").json()
        assert data["log_level"] == "DEBUG"
        assert data["resolve_input_path"] is False

        client.patch("/api/config", json={"log_level": "INFO", "resolve_input_path": True})

    def test_reject_unknown_log_level(self, client):
        response = client.patch("/api/config", json={"log_level": "LOUD"})
        assert response.status_code == 400

    def test_boolean_spellings(self, client):
        from tex_sync.core.config import get_db

        get_db().set_config("resolve_input_path", "yes")
        assert client.get("/api/config").json()["resolve_input_path"] is True

        get_db().set_config("resolve_input_path", "off")
        assert client.get("/api/config").json()["resolve_input_path"] is False

        get_db().set_config("resolve_input_path", "true")

    def test_synctex_command_backend(self, client, project_id, tex_project):
        missing = str(tex_project["dir"] / "no-synctex")
        response = client.patch("/api/config", json={"use_builtin_engine": False, "synctex_path": missing})
        assert response.status_code == 200
        data = client.get("/api/config").json()
        assert data["use_builtin_engine"] is False
        assert data["synctex_path"] == missing

        try:
            response = client.post(
                f"/api/synctex/{project_id}/forward",
                json={"filename": str(tex_project["main"]), "line": 3},
            )
            assert response.status_code == 500
            assert "synctex command not found" in response.json()["detail"]
        finally:
            client.patch("/api/config", json={"use_builtin_engine": True, "synctex_path": "synctex"})
