from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import make_token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container)

    @app.route("/api/upload", methods=["POST"], endpoint="upload_image")
    @token_required
    def upload_image():
        filename = container.visitor_images.save(request.files.get("image"))
        return jsonify({"filename": filename})
