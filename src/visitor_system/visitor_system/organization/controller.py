from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import make_token_required, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container)
    org = container.organization_service

    # Companies are mounted outside /api, as the front-end already calls them there.
    @app.route("/companies", methods=["GET"], endpoint="list_companies")
    @token_required
    def list_companies():
        return jsonify([c.to_dict() for c in org.list_companies()])

    @app.route("/companies/<int:company_id>", methods=["GET"], endpoint="get_company")
    @token_required
    def get_company(company_id: int):
        return jsonify(org.get_company(company_id).to_dict())

    @app.route("/companies", methods=["POST"], endpoint="create_company")
    @token_required
    def create_company():
        company_id = org.create_company(request_data())
        return jsonify({"id": company_id, "message": "Tạo công ty thành công"}), 201

    @app.route("/companies/<int:company_id>", methods=["PUT"], endpoint="update_company")
    @token_required
    def update_company(company_id: int):
        org.update_company(company_id, request_data())
        return jsonify({"message": "Cập nhật công ty thành công"})

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @token_required
    def list_departments():
        return jsonify([d.to_dict() for d in org.list_departments()])

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="get_department")
    @token_required
    def get_department(department_id: int):
        return jsonify(org.get_department(department_id).to_dict())

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @token_required
    def create_department():
        department_id = org.create_department(request_data())
        return jsonify({"id": department_id, "message": "Tạo phòng ban thành công"}), 201

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="update_department")
    @token_required
    def update_department(department_id: int):
        org.update_department(department_id, request_data())
        return jsonify({"message": "Cập nhật phòng ban thành công"})

    @app.route("/api/designations", methods=["GET"], endpoint="list_designations")
    @token_required
    def list_designations():
        return jsonify([d.to_dict() for d in org.list_designations()])

    @app.route("/api/designations/<int:designation_id>", methods=["GET"], endpoint="get_designation")
    @token_required
    def get_designation(designation_id: int):
        return jsonify(org.get_designation(designation_id).to_dict())

    @app.route(
        "/api/designations/departments/<int:company_id>",
        methods=["GET"],
        endpoint="designation_department_options",
    )
    @token_required
    def designation_department_options(company_id: int):
        return jsonify([o.to_dict() for o in org.active_department_options(company_id=company_id)])

    @app.route("/api/designations", methods=["POST"], endpoint="create_designation")
    @token_required
    def create_designation():
        designation_id = org.create_designation(request_data())
        return jsonify({"id": designation_id, "message": "Tạo chức danh thành công"}), 201

    @app.route("/api/designations/<int:designation_id>", methods=["PUT"], endpoint="update_designation")
    @token_required
    def update_designation(designation_id: int):
        org.update_designation(designation_id, request_data())
        return jsonify({"message": "Cập nhật chức danh thành công"})

    @app.route("/api/open/companies", methods=["GET"], endpoint="open_companies")
    def open_companies():
        return jsonify([o.to_dict() for o in org.active_company_options()])

    @app.route("/api/open/departments", methods=["GET"], endpoint="open_departments")
    def open_departments():
        return jsonify([o.to_dict() for o in org.active_department_options()])
