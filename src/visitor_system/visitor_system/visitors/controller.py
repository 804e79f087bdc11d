from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import make_token_required
from ..container import Container
from ..core.enums import RedemptionOutcome
from ..core.exceptions import ValidationError
from .service import parse_visitor_form

_SIGNOUT_PAGES = {
    RedemptionOutcome.SIGNED_OUT: (
        200,
        "<h2>Khách #{visitor_id} đã trả thẻ thành công. Mã QR đã hết hiệu lực.</h2>",
    ),
    RedemptionOutcome.ALREADY_SIGNED_OUT: (
        409,
        "<h2>Mã QR của khách #{visitor_id} đã được sử dụng.</h2>",
    ),
    RedemptionOutcome.NOT_FOUND: (
        404,
        "<h2>Không tìm thấy khách #{visitor_id}.</h2>",
    ),
}


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container)
    visitors = container.visitor_service

    @app.route("/api/visitors", methods=["GET"], endpoint="list_visitors")
    @token_required
    def list_visitors():
        return jsonify([v.to_dict() for v in visitors.list_visitors()])

    @app.route("/api/visitors/<int:visitor_id>", methods=["GET"], endpoint="get_visitor")
    @token_required
    def get_visitor(visitor_id: int):
        return jsonify(visitors.get_visitor(visitor_id).to_dict())

    @app.route("/api/visitors", methods=["POST"], endpoint="create_visitor")
    @token_required
    def create_visitor():
        details = parse_visitor_form(request.form)
        with container.visitor_images.stored(request.files.get("image")) as image:
            token = visitors.check_in(details, image=image)
        return jsonify({"visitorId": token.visitor_id, "qr": token.data_url})

    @app.route("/api/visitors/<int:visitor_id>", methods=["PUT"], endpoint="update_visitor")
    @token_required
    def update_visitor(visitor_id: int):
        details = parse_visitor_form(request.form)
        with container.visitor_images.stored(request.files.get("image")) as image:
            visitors.update_visitor(visitor_id, details, image=image)
        return jsonify({"message": "Cập nhật khách thành công"})

    @app.route("/api/visitors/<int:visitor_id>/status", methods=["PUT"], endpoint="toggle_visitor_status")
    @token_required
    def toggle_visitor_status(visitor_id: int):
        status = visitors.toggle_check_in_status(visitor_id)
        return jsonify({"message": "Đã đổi trạng thái khách", "status": 1 if status else 0})

    @app.route("/api/visitors/<int:visitor_id>/card", methods=["GET"], endpoint="visitor_card")
    @token_required
    def visitor_card(visitor_id: int):
        token = visitors.get_card(visitor_id)
        return jsonify({"qr": token.data_url})

    # Sign-out is opened from a phone scanning the QR, so it is not behind the auth policy.
    @app.route("/api/visitors/signout/<int:visitor_id>", methods=["GET"], endpoint="visitor_signout")
    def visitor_signout(visitor_id: int):
        result = visitors.redeem_token(visitor_id)
        status, template = _SIGNOUT_PAGES[result.outcome]
        return template.format(visitor_id=result.visitor_id), status

    @app.route("/api/visitors/signout/scan", methods=["POST"], endpoint="visitor_signout_scan")
    @token_required
    def visitor_signout_scan():
        file = request.files.get("image")
        if file is None or not file.filename:
            raise ValidationError("Chưa gửi ảnh mã QR")

        result = visitors.redeem_scanned_image(file.read())
        status = _SIGNOUT_PAGES[result.outcome][0]
        return (
            jsonify(
                {
                    "success": result.first_redemption,
                    "visitorId": result.visitor_id,
                    "outcome": result.outcome.value,
                }
            ),
            status,
        )
