import logging, sys

def setup_logging(level = logging.INFO):
	root_logger = logging.getLogger()
	root_logger.setLevel(level)

	# Re-running setup (tests, repeated CLI entry) must not stack handlers
	for existing in list(root_logger.handlers):
		if getattr(existing, "_nbexplorer", False):
			root_logger.removeHandler(existing)

	handler = logging.StreamHandler(sys.stdout)
	handler._nbexplorer = True
	
	formatter = logging.Formatter(
		"[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
		datefmt="%H:%M:%S"
	)
	handler.setFormatter(formatter)
	root_logger.addHandler(handler)
