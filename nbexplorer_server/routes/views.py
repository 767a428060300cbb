import logging
from flask import Blueprint, render_template, current_app

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)


@views_bp.route("/")
def home():
	"""Explorer page: drop zone, folder gallery and viewer."""
	session = current_app.config["EXPLORER_SESSION"]
	return render_template(
		"index.html",
		loaded=session.is_loaded,
		show_scripts=session.config.show_scripts
	)
