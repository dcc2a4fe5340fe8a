from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from taskremind.errors import TaskError


def create_app(config_object="taskremind.config.Config", store=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json.sort_keys = False

    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "*").split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins or "*"}})

    # Attach the task store
    from taskremind.utils.store import init_app as init_store

    init_store(app, store)

    # Register blueprints
    from taskremind.routes.task_routes import tasks_bp

    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="Task Reminder API"), 200

    @app.errorhandler(TaskError)
    def task_error(exc):
        if exc.status_code >= 500:
            app.logger.error("Task operation failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(message="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(message="Method Not Allowed"), 405

    @app.errorhandler(Exception)
    def server_error(exc):
        if isinstance(exc, HTTPException):
            return jsonify(message=exc.description), exc.code
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify(message="Internal Server Error"), 500

    return app
