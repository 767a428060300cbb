import logging
from functools import wraps
from pathlib import Path
from flask import Blueprint, request, jsonify, current_app

from nbexplorer import ExplorerSession, NavigationError, NoSupportedFilesError
from nbexplorer.sources import from_upload, scan_directory

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def get_session() -> ExplorerSession:
	"""Get the process-wide explorer session."""
	return current_app.config["EXPLORER_SESSION"]


def serialized(f):
	"""Run the handler while holding the session lock."""
	@wraps(f)
	def decorated(*args, **kwargs):
		with current_app.config["EXPLORER_LOCK"]:
			return f(*args, **kwargs)
	return decorated


def require_files(f):
	"""Decorator to require a loaded session."""
	@wraps(f)
	def decorated(*args, **kwargs):
		if not get_session().is_loaded:
			return jsonify({"error": "No files loaded"}), 400
		return f(*args, **kwargs)
	return decorated


def parse_bool(value, default=None):
	if value is None or value == "":
		return default
	if isinstance(value, bool):
		return value
	return str(value).lower() in ("1", "true", "yes", "on")


def folder_payload(session: ExplorerSession, query: str = "", show_scripts=None) -> dict:
	listing = session.listing(query, show_scripts)
	payload = listing.to_dict()
	payload["trail"] = session.navigator.trail()
	return payload


# ============ Session ============

@api_bp.route("/status", methods=["GET"])
@serialized
def status():
	session = get_session()
	return jsonify({
		"loaded": session.is_loaded,
		"files": len(session.entries),
		"cards": len(session.registry),
		"viewerOpen": session.viewer.is_open,
		"showScripts": session.config.show_scripts
	})


@api_bp.route("/load/upload", methods=["POST"])
@serialized
def load_upload():
	"""
	Load uploaded files. Parallel form lists carry each file's location:
	`paths` from a directory picker, `full_paths` from a dropped folder.
	"""
	files = request.files.getlist("files")
	paths = request.form.getlist("paths")
	full_paths = request.form.getlist("full_paths")

	if not files:
		return jsonify({"error": "No files uploaded"}), 400

	refs = []
	for i, storage in enumerate(files):
		relative = paths[i] if i < len(paths) else None
		full = full_paths[i] if i < len(full_paths) else None
		refs.append(from_upload(storage, relative, full))

	return _load(refs)


@api_bp.route("/load/directory", methods=["POST"])
@serialized
def load_directory():
	"""Load a folder from the server's filesystem."""
	data = request.get_json(silent=True) or {}
	path = (data.get("path") or "").strip()

	if not path:
		return jsonify({"error": "Directory path required"}), 400

	directory = Path(path).expanduser()
	if not directory.exists():
		return jsonify({"error": f"Path does not exist: {directory}"}), 404
	if not directory.is_dir():
		return jsonify({"error": "Path is not a directory"}), 400

	try:
		refs = scan_directory(directory, get_session().config.reserved_prefix)
	except PermissionError:
		return jsonify({"error": "Permission denied"}), 403

	return _load(refs)


def _load(refs):
	session = get_session()
	try:
		count = session.load(refs)
	except NoSupportedFilesError as e:
		return jsonify({"error": str(e)}), 400
	except Exception as e:
		logger.exception("Failed to load files")
		return jsonify({"error": f"Failed to load files: {str(e)}"}), 500

	payload = folder_payload(session)
	payload["count"] = count
	return jsonify(payload)


@api_bp.route("/clear", methods=["POST"])
@serialized
def clear():
	get_session().clear()
	return jsonify({"success": True})


# ============ Folders ============

@api_bp.route("/folder", methods=["GET"])
@serialized
@require_files
def folder():
	query = request.args.get("q", "")
	show_scripts = parse_bool(request.args.get("show_py"))
	return jsonify(folder_payload(get_session(), query, show_scripts))


@api_bp.route("/folder/enter", methods=["POST"])
@serialized
@require_files
def enter_folder():
	data = request.get_json(silent=True) or {}
	name = data.get("name")
	if not name:
		return jsonify({"error": "Folder name required"}), 400

	session = get_session()
	try:
		session.enter(name)
	except NavigationError as e:
		return jsonify({"error": str(e)}), 404
	return jsonify(folder_payload(session))


@api_bp.route("/folder/breadcrumb", methods=["POST"])
@serialized
@require_files
def jump_breadcrumb():
	"""Jump to breadcrumb `index` (0 is the first folder, -1 is root)."""
	data = request.get_json(silent=True) or {}
	try:
		index = int(data.get("index", -1))
	except (TypeError, ValueError):
		return jsonify({"error": "Breadcrumb index must be an integer"}), 400

	session = get_session()
	session.jump_to_breadcrumb(index)
	return jsonify(folder_payload(session))


@api_bp.route("/files/<key>/visible", methods=["POST"])
@serialized
def file_visible(key: str):
	entry = get_session().notify_visible(key)
	if entry is None:
		return jsonify({"error": "Unknown file"}), 404
	return jsonify(entry.to_dict())


# ============ Viewer ============

@api_bp.route("/viewer/open", methods=["POST"])
@serialized
def viewer_open():
	data = request.get_json(silent=True)
	if not isinstance(data, dict):
		data = {}
	card_id = data.get("cardId")
	visible = data.get("visible")
	if not card_id or not isinstance(card_id, str):
		return jsonify({"error": "Card id required"}), 400
	if visible is not None and not (isinstance(visible, list) and all(isinstance(v, str) for v in visible)):
		return jsonify({"error": "'visible' must be a list of card ids"}), 400

	state = get_session().open_viewer(card_id, visible)
	if state is None:
		return jsonify({"error": "Unknown card"}), 404
	return jsonify(state.to_dict())


@api_bp.route("/viewer/prev", methods=["POST"])
@serialized
def viewer_prev():
	return _viewer_reply(get_session().step_prev())


@api_bp.route("/viewer/next", methods=["POST"])
@serialized
def viewer_next():
	return _viewer_reply(get_session().step_next())


@api_bp.route("/viewer/close", methods=["POST"])
@serialized
def viewer_close():
	get_session().close_viewer()
	return jsonify({"success": True})


def _viewer_reply(state):
	if state is None:
		return jsonify({"error": "Viewer is not open"}), 409
	return jsonify(state.to_dict())
