VERSION = (0, 1, 0)
VERSION_STR = f"{VERSION[0]}.{VERSION[1]}.{VERSION[2]}"

ARGV0 = "serve"
DESCRIPTION = "Simple static HTTP server."

DEFAULT_PATH = "."
DEFAULT_PORT = 8080
DEFAULT_THREADS = 2
DEFAULT_WORKERS = 1
DEFAULT_HOST = "0.0.0.0"

DEBUG_ENV = "SERVE_DEBUG"

NOT_FOUND_BODY = "<html><body><h1>404 - File not found</h1></body></html>"

HELP_MESSAGE = f"""Usage: {ARGV0} [PATH] [OPTIONS]

{DESCRIPTION}

Arguments:
  PATH                Specify the server path (default: '{DEFAULT_PATH}')

Options:
  -h, --help          Show this help message and exit
  -p, --port PORT     Set the server port (default: {DEFAULT_PORT})
  -t, --threads NUM   Set the number of threads (default: {DEFAULT_THREADS})
  -w, --workers NUM   Set the number of workers (default: {DEFAULT_WORKERS})
"""
