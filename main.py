import argparse
import logging
from nbexplorer.logger import setup_logging
from nbexplorer_server import ServerConfig, run_server

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def main():
	parser = argparse.ArgumentParser(description="Notebook Explorer")
	parser.add_argument("--dir", "-d", default=None, help="Folder to load at startup")
	parser.add_argument("--config", "-c", default=None, help="Explorer config JSON (preview sizes, extensions, ...)")
	parser.add_argument("--host", default=DEFAULT_HOST, help="Server host")
	parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Server port")
	parser.add_argument("--hide-py", action="store_true", help="Hide .py files in folder listings")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging")

	args = parser.parse_args()

	setup_logging(level=logging.DEBUG if args.debug else logging.INFO)

	config = ServerConfig(
		host=args.host,
		port=args.port,
		debug=args.debug,
		explorer_config=args.config,
		preload_dir=args.dir,
		show_scripts=False if args.hide_py else None
	)

	try:
		logging.info(f"Starting explorer at http://{args.host}:{args.port}")
		logging.info("Press Ctrl+C to stop")
		run_server(config)
	except KeyboardInterrupt:
		logging.info("Shutting down...")
	except Exception as e:
		logging.critical(f"Fatal error: {e}", exc_info=True)


if __name__ == "__main__":
	main()
