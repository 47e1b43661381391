import os
from flask import Blueprint, current_app, jsonify
from observability.metrics import snapshot
from services.storage.chat_image_files import upload_dir

metrics_bp = Blueprint("metrics", __name__)

@metrics_bp.route("/metrics", methods=["GET"])
def chat_image_metrics():
    data = snapshot()
    # files on disk, orphans included; the records table is not consulted
    target = upload_dir(current_app.config["UPLOAD_ROOT"])
    data["chat_image_files_on_disk"] = len(os.listdir(target)) if os.path.isdir(target) else 0
    return jsonify(data)
