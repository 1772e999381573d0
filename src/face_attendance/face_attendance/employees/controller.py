from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import api_errors
from ..common.validators import optional_str
from ..core.exceptions import EmployeeNotFoundError, ValidationError
from ..container import Container
from .model import Employee


def employee_json(e: Employee, *, include_embedding: bool = False) -> dict:
    body = {
        "employeeId": e.employee_id,
        "employeeCode": e.employee_code,
        "name": e.name,
        "department": e.department,
        "faceId": e.face_id,
        "registrationDate": e.registration_date,
        "isActive": e.is_active,
    }
    if include_embedding:
        body["embedding"] = list(e.embedding) if e.embedding is not None else None
    return body


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/find-by-embedding", methods=["POST"], endpoint="employees_find_by_embedding")
    @api_errors
    def find_by_embedding():
        data = _json_body()
        embedding = data.get("embedding")
        if not isinstance(embedding, list):
            raise ValidationError("Invalid embedding data")

        match = container.matcher.match(embedding, data.get("threshold"))
        if match is None:
            return jsonify({"message": "No matching employee found"}), 404

        employee = container.employees_repo.get_by_id(match.employee_id)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")

        body = employee_json(employee, include_embedding=True)
        body["similarity"] = match.similarity
        return jsonify(body), 200

    @app.route("/api/employees/register", methods=["POST"], endpoint="employees_register")
    @api_errors
    def register_employee():
        data = _json_body()
        employee = container.employee_service.register(
            employee_code=data.get("employeeCode"),
            name=data.get("name"),
            department=data.get("department"),
            embedding=data.get("embedding"),
            face_id=optional_str(data.get("faceId"), "faceId"),
        )
        return jsonify(employee_json(employee, include_embedding=True)), 201

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    @api_errors
    def get_employee(employee_id: str):
        return jsonify(employee_json(container.employee_service.get(employee_id))), 200

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="employees_update")
    @api_errors
    def update_employee(employee_id: str):
        data = _json_body()
        employee = container.employee_service.update(
            employee_id,
            name=optional_str(data.get("name"), "name"),
            department=optional_str(data.get("department"), "department"),
            face_id=optional_str(data.get("faceId"), "faceId"),
            embedding=data.get("embedding"),
        )
        return jsonify(employee_json(employee)), 200

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="employees_deactivate")
    @api_errors
    def deactivate_employee(employee_id: str):
        container.employee_service.deactivate(employee_id)
        return jsonify({"employeeId": employee_id, "isActive": False}), 200

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @api_errors
    def list_employees():
        is_active = request.args.get("isActive", "true").strip().lower() not in {"false", "0", "no"}
        employees = container.employee_service.list_employees(
            is_active=is_active,
            department=request.args.get("department"),
        )
        return jsonify([employee_json(e) for e in employees]), 200
