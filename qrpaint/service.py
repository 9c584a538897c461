"""HTTP front-end for the QR pipeline."""

from flask import Flask, Response, jsonify, request

from qrpaint.errors import OptionsError
from qrpaint.logging import audit, get_logger, trace
from qrpaint.logo import LogoAssets
from qrpaint.pipeline import IMAGE_SIZE_IN_PIXELS, Options, qrcode

log = get_logger("service")


def _parse_request() -> tuple[str, Options]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise OptionsError("Request body must be a JSON object")
    text = payload.get("input")
    if not isinstance(text, str):
        raise OptionsError("Missing 'input' string field")
    return text, Options.from_dict(payload.get("options"))


@trace
def create_app(assets: LogoAssets | None = None, image_size: int = IMAGE_SIZE_IN_PIXELS) -> Flask:
    """Create a Flask app serving QR codes.

    ``POST /qrcode`` and ``POST /qrcode/query`` behave identically; both
    take ``{"input": ..., "options": {...}}`` and answer with a PNG or a
    JSON error.
    """
    app = Flask(__name__)

    def handle(endpoint: str):
        try:
            text, options = _parse_request()
        except OptionsError as exc:
            audit("http.bad_request", logger=log, endpoint=endpoint, error=exc.message)
            return jsonify({"error": {"message": exc.message}}), 400

        result = qrcode(text, options, assets=assets, image_size=image_size)
        if not result.ok:
            audit("http.failed", logger=log, endpoint=endpoint, error=result.error.message)
            return jsonify(result.to_dict()), 422

        audit("http.served", logger=log, endpoint=endpoint, png_bytes=len(result.image))
        return Response(result.image, mimetype="image/png")

    @app.route("/qrcode", methods=["POST"])
    def qrcode_update():
        return handle("qrcode")

    @app.route("/qrcode/query", methods=["POST"])
    def qrcode_query():
        return handle("qrcode_query")

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "image_size": image_size})

    return app
