from flask import Blueprint, current_app, jsonify, request, send_from_directory
from observability.metrics import inc
from services.storage.chat_image_files import UPLOAD_SUBDIR, upload_dir

chat_image_bp = Blueprint("chat_images", __name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "Content-Type",
}


@chat_image_bp.after_request
def add_cors_headers(response):
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


@chat_image_bp.route("/upload", methods=["POST"])
def upload_chat_image():
    inc("chat_image_uploads")

    handler = current_app.extensions["chat_image_handler"]
    # script_root keeps a mount prefix (SCRIPT_NAME) in the returned URL
    result = handler.handle(request.files.get("image"), request.host,
                            request.script_root + request.path)

    if not result.success:
        inc("chat_image_failures")
        inc(f"chat_image_failures_{result.error_kind.value}")
        return jsonify(result.to_json()), 500

    inc("chat_image_successes")
    return jsonify(result.to_json())


@chat_image_bp.route(f"/{UPLOAD_SUBDIR}/<path:filename>", methods=["GET"])
def serve_chat_image(filename):
    return send_from_directory(upload_dir(current_app.config["UPLOAD_ROOT"]), filename)
