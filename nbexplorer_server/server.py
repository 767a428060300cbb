import logging
import threading
from pathlib import Path
from typing import Optional
from flask import Flask

from nbexplorer import ExplorerSession, NoSupportedFilesError
from nbexplorer.sources import scan_directory
from .config import ServerConfig

logger = logging.getLogger(__name__)


def create_app(config: Optional[ServerConfig] = None) -> Flask:
	"""Create and configure the Flask application."""
	if config is None:
		config = ServerConfig()

	server_dir = Path(__file__).parent
	template_dir = server_dir / "templates"

	app = Flask(
		__name__,
		template_folder=str(template_dir)
	)

	app.config["SECRET_KEY"] = config.secret_key
	app.config["MAX_CONTENT_LENGTH"] = config.max_upload_size
	app.config["EXPLORER_CONFIG"] = config
	app.config["EXPLORER_SESSION"] = ExplorerSession(config.load_explorer_config())
	# Handlers mutate one shared session; run them one at a time
	app.config["EXPLORER_LOCK"] = threading.Lock()

	if config.preload_dir is not None:
		try:
			app.config["EXPLORER_SESSION"].load(scan_directory(config.preload_dir))
			logger.info(f"Preloaded {config.preload_dir}")
		except (NoSupportedFilesError, NotADirectoryError) as e:
			logger.warning(f"Could not preload {config.preload_dir}: {e}")

	from .routes.views import views_bp
	from .routes.api import api_bp

	app.register_blueprint(views_bp)
	app.register_blueprint(api_bp, url_prefix="/api")

	logger.info(f"Explorer server initialized (templates: {template_dir})")

	return app


def run_server(config: Optional[ServerConfig] = None):
	"""Run the explorer web server."""
	if config is None:
		config = ServerConfig()

	app = create_app(config)

	logger.info(f"Starting explorer on http://{config.host}:{config.port}")

	app.run(
		host=config.host,
		port=config.port,
		debug=config.debug,
		threaded=True
	)
