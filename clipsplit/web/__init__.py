"""Flask application factory for the ClipSplit JSON API."""

from flask import Flask, jsonify

from clipsplit.errors import ComputationError, SplitError, ValidationError
from clipsplit.ffutil import FFmpegNotFoundError


def _status_for(error: SplitError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, ComputationError):
        return 422
    if isinstance(error, FFmpegNotFoundError):
        return 503
    return 500


def create_app() -> Flask:
    app = Flask(__name__)

    from clipsplit.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(SplitError)
    def split_error(error: SplitError):
        body = {"error": str(error), "code": error.code}
        if error.details:
            body["details"] = error.details
        return jsonify(body), _status_for(error)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    return app
