from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import make_token_required, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container)
    employees = container.employee_service
    org = container.organization_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @token_required
    def list_employees():
        return jsonify([e.to_public_dict() for e in employees.list_employees()])

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @token_required
    def get_employee(employee_id: int):
        return jsonify(employees.get_employee(employee_id).to_public_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @token_required
    def create_employee():
        form = request_data()
        with container.employee_images.stored(request.files.get("image")) as image:
            employee_id = employees.create_employee(form, image=image)
        return jsonify({"id": employee_id}), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @token_required
    def update_employee(employee_id: int):
        form = request_data()
        with container.employee_images.stored(request.files.get("image")) as image:
            employees.update_employee(employee_id, form, image=image)
        return jsonify({"message": "Cập nhật nhân viên thành công"})

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @token_required
    def delete_employee(employee_id: int):
        employees.delete_employee(employee_id)
        return jsonify({"message": "Xoá nhân viên thành công"})

    @app.route("/api/employees/departments/<int:company_id>", methods=["GET"], endpoint="employee_departments")
    @token_required
    def employee_departments(company_id: int):
        return jsonify([d.to_dict() for d in org.departments_for_company(company_id)])

    @app.route(
        "/api/employees/designations/<int:department_id>",
        methods=["GET"],
        endpoint="employee_designations",
    )
    @token_required
    def employee_designations(department_id: int):
        return jsonify([d.to_dict() for d in org.designations_for_department(department_id)])
