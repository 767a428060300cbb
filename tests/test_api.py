"""
Tests for the Flask API.
"""

import io
import json

import pytest

from nbexplorer.models import ContentKind
from nbexplorer_server import ServerConfig, create_app
from tests.helpers import code, md, notebook


@pytest.fixture
def app():
	app = create_app(ServerConfig(secret_key="test"))
	app.config["TESTING"] = True
	return app


@pytest.fixture
def client(app):
	return app.test_client()


def upload(client, files):
	"""files: list of (picker path, content)."""
	data = {
		"files": [(io.BytesIO(content.encode("utf-8")), path.replace("\\", "/").rsplit("/", 1)[-1]) for path, content in files],
		"paths": [path for path, _ in files],
	}
	return client.post("/api/load/upload", data=data, content_type="multipart/form-data")


@pytest.fixture
def loaded(client):
	res = upload(client, [
		("a\\b\\x.ipynb", notebook(md("# X"), code("x", outputs=[{"data": {"image/png": "AAAA"}}]))),
		("a/y.py", "y = 1"),
		("z.py", "z = 1"),
	])
	assert res.status_code == 200
	return client


class TestSession:

	def test_status_empty(self, client):
		data = client.get("/api/status").get_json()
		assert data["loaded"] is False
		assert data["files"] == 0

	def test_index_page(self, client):
		res = client.get("/")
		assert res.status_code == 200
		assert b"Notebook Explorer" in res.data

	def test_upload_builds_tree(self, client):
		res = upload(client, [("a\\b\\x.ipynb", notebook()), ("z.py", "")])
		data = res.get_json()

		assert data["count"] == 2
		assert data["folders"] == ["a"]
		assert [f["name"] for f in data["files"]] == ["z.py"]
		assert data["trail"] == "root"

	def test_upload_without_supported_files(self, client):
		res = upload(client, [("readme.md", "# hi")])
		assert res.status_code == 400
		assert res.get_json()["error"] == "No .ipynb or .py files found."
		assert client.get("/api/status").get_json()["loaded"] is False

	def test_upload_nothing(self, client):
		res = client.post("/api/load/upload", data={}, content_type="multipart/form-data")
		assert res.status_code == 400

	def test_load_directory(self, client, tmp_path):
		(tmp_path / "nbs").mkdir()
		(tmp_path / "nbs" / "n.ipynb").write_text(notebook(), encoding="utf-8")

		res = client.post("/api/load/directory", json={"path": str(tmp_path / "nbs")})
		assert res.status_code == 200
		assert res.get_json()["folders"] == ["nbs"]

	def test_load_directory_missing(self, client, tmp_path):
		res = client.post("/api/load/directory", json={"path": str(tmp_path / "nope")})
		assert res.status_code == 404

	def test_clear(self, loaded):
		assert loaded.post("/api/clear").status_code == 200
		assert loaded.get("/api/status").get_json()["loaded"] is False
		assert loaded.get("/api/folder").status_code == 400


class TestFolders:

	def test_enter_and_breadcrumbs(self, loaded):
		data = loaded.post("/api/folder/enter", json={"name": "a"}).get_json()
		assert data["folders"] == ["b"]
		assert [f["name"] for f in data["files"]] == ["y.py"]

		data = loaded.post("/api/folder/enter", json={"name": "b"}).get_json()
		assert data["breadcrumbs"] == ["root", "a", "b"]
		assert data["trail"] == "root → a → b"

		data = loaded.post("/api/folder/breadcrumb", json={"index": 0}).get_json()
		assert data["breadcrumbs"] == ["root", "a"]

		data = loaded.post("/api/folder/breadcrumb", json={"index": -1}).get_json()
		assert data["breadcrumbs"] == ["root"]

	def test_enter_unknown(self, loaded):
		assert loaded.post("/api/folder/enter", json={"name": "nope"}).status_code == 404

	def test_bad_breadcrumb_index(self, loaded):
		assert loaded.post("/api/folder/breadcrumb", json={"index": "x"}).status_code == 400

	def test_filters(self, loaded):
		data = loaded.get("/api/folder?q=Z").get_json()
		assert [f["name"] for f in data["files"]] == ["z.py"]
		assert data["folders"] == []

		data = loaded.get("/api/folder?show_py=0").get_json()
		assert data["files"] == []


class TestPreviewAndViewer:

	def test_visible_renders_preview(self, loaded):
		data = loaded.post("/api/files/f2/visible").get_json()
		assert data["state"] == "loaded"
		assert data["cardId"]
		assert "z = 1" in data["preview"]

	def test_visible_unknown(self, loaded):
		assert loaded.post("/api/files/f99/visible").status_code == 404

	def test_viewer_round_trip(self, loaded):
		loaded.post("/api/folder/enter", json={"name": "a"})
		loaded.post("/api/folder/enter", json={"name": "b"})
		nb_card = loaded.post("/api/files/f0/visible").get_json()["cardId"]
		py_card = loaded.post("/api/files/f1/visible").get_json()["cardId"]

		state = loaded.post("/api/viewer/open", json={"cardId": nb_card, "visible": [nb_card, py_card]}).get_json()
		assert state["title"] == "x.ipynb"
		assert "data:image/png;base64,AAAA" in state["html"]
		assert state["hasPrev"] is False
		assert state["hasNext"] is True

		state = loaded.post("/api/viewer/next").get_json()
		assert state["title"] == "y.py"
		assert state["hasNext"] is False

		state = loaded.post("/api/viewer/next").get_json()
		assert state["title"] == "y.py"

		assert loaded.post("/api/viewer/close").status_code == 200
		assert loaded.post("/api/viewer/prev").status_code == 409

	def test_open_unknown_card(self, loaded):
		assert loaded.post("/api/viewer/open", json={"cardId": "card-404"}).status_code == 404

	def test_open_requires_card(self, loaded):
		assert loaded.post("/api/viewer/open", json={}).status_code == 400

	@pytest.mark.parametrize("body", [
		{"cardId": {"a": 1}},
		{"cardId": ["card-1"]},
		{"cardId": "card-1", "visible": [["card-1"]]},
		{"cardId": "card-1", "visible": "card-1"},
		["card-1"],
	])
	def test_open_rejects_malformed_body(self, loaded, body):
		loaded.post("/api/files/f2/visible")
		res = loaded.post("/api/viewer/open", json=body)
		assert res.status_code == 400
		assert "error" in res.get_json()

	def test_malformed_outputs_fail_the_preview(self, client):
		bad = '{"cells": [{"cell_type": "code", "source": "x", "outputs": 5}]}'
		upload(client, [("bad.ipynb", bad)])

		data = client.post("/api/files/f0/visible").get_json()
		assert data["state"] == "failed"
		assert data["error"] == "Could not parse"
		assert data["cardId"] is None

	def test_viewer_reports_malformed_notebook(self, app, client):
		upload(client, [("ok.py", "x")])
		bad = '{"cells": [{"cell_type": "code", "source": "x", "outputs": [{"data": "oops"}]}]}'
		card_id = app.config["EXPLORER_SESSION"].registry.register("bad.ipynb", bad, ContentKind.NOTEBOOK)

		res = client.post("/api/viewer/open", json={"cardId": card_id, "visible": [card_id]})
		assert res.status_code == 200
		state = res.get_json()
		assert state["title"] == "bad.ipynb"
		assert state["error"] == "Could not parse notebook"


class TestPreload:

	def test_preload_dir(self, tmp_path):
		(tmp_path / "s.py").write_text("s = 1", encoding="utf-8")
		app = create_app(ServerConfig(secret_key="test", preload_dir=tmp_path))
		data = app.test_client().get("/api/status").get_json()
		assert data["loaded"] is True
		assert data["files"] == 1

	def test_preload_empty_dir(self, tmp_path):
		app = create_app(ServerConfig(secret_key="test", preload_dir=tmp_path))
		assert app.test_client().get("/api/status").get_json()["loaded"] is False

	def test_explorer_config_file(self, tmp_path):
		config_path = tmp_path / "explorer.json"
		config_path.write_text(json.dumps({"show_scripts": False, "preview_lines": 2}), encoding="utf-8")
		app = create_app(ServerConfig(secret_key="test", explorer_config=config_path))
		session = app.config["EXPLORER_SESSION"]
		assert session.config.show_scripts is False
		assert session.config.preview_lines == 2
