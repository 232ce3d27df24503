import sys
from pathlib import Path

# Allow importing faq_matcher/
sys.path.append(str(Path(__file__).resolve().parent.parent))

import logging
import os

from flask import Flask, request, jsonify
from flask_cors import CORS

from faq_matcher.config import Settings
from faq_matcher.errors import EmptyQueryError, FaqMatcherError
from faq_matcher.security import is_authorized
from faq_matcher.service import predict, train

logger = logging.getLogger(__name__)

# Short modes kept for existing clients
MODES = {
    "train": "train",
    "l": "train",
    "predict": "predict",
    "p": "predict",
}


def _failure(kind: str, message: str, status: int):
    return jsonify({
        "success": False,
        "error": kind,
        "message": message,
    }), status


# --------------------------------------------------
# APP SETUP
# --------------------------------------------------
def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    CORS(app)
    app.config["FAQ_SETTINGS"] = settings

    # --------------------------------------------------
    # ERROR TRANSLATION
    # --------------------------------------------------
    @app.errorhandler(FaqMatcherError)
    def handle_core_error(err: FaqMatcherError):
        status = 400 if isinstance(err, EmptyQueryError) else 500
        if status == 500:
            logger.error(f"{err.kind}: {err}")
        return _failure(err.kind, str(err), status)

    # --------------------------------------------------
    # API ROUTES
    # --------------------------------------------------
    @app.route("/", methods=["GET", "HEAD"])
    def health_check():
        return jsonify({
            "status": "ok",
            "message": "FAQ matcher backend is running"
        })

    @app.route("/api/run", methods=["POST"])
    def api_run():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return _failure("InvalidRequest", "request body must be a JSON object", 400)
        key = payload.get("key") or request.headers.get("X-API-Key")

        if not is_authorized(key, settings.access_key):
            logger.warning("Rejected request with missing or invalid access key")
            return _failure("Unauthorized", "Not executable", 403)

        mode = MODES.get(str(payload.get("mode", "")).strip().lower())
        if mode is None:
            return _failure(
                "InvalidMode",
                "mode must be 'train' or 'predict'",
                400,
            )

        # --------------------------------------------------
        # TRAINING MODE
        # --------------------------------------------------
        if mode == "train":
            result = train(settings)
            return jsonify({"success": True, **result.to_dict()})

        # --------------------------------------------------
        # PREDICTION MODE
        # --------------------------------------------------
        query = payload.get("query") or payload.get("que_sentence") or ""
        if not isinstance(query, str):
            raise EmptyQueryError("query must be a string")
        result = predict(settings, query)
        return jsonify({"success": True, **result.to_dict()})

    return app


# --------------------------------------------------
# ENTRY POINT
# --------------------------------------------------
app = create_app()

if __name__ == "__main__":
    settings = app.config["FAQ_SETTINGS"]
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.environ.get("PORT", settings.port))
    app.run(host="0.0.0.0", port=port)
