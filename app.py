from taskremind.app import create_app
from taskremind.config import Config
from taskremind.logging_setup import setup_logging

setup_logging(Config.LOG_LEVEL)

# Expose a module-level `app` for WSGI servers (gunicorn expects `app:app`).
# The task store is in memory, so run a single worker process.
app = create_app()


if __name__ == "__main__":
    # Local development only: run the built-in server.
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
