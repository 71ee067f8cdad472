from __future__ import annotations

from flask import Flask, g

from ..common.http import Guards, list_args, page_payload, register_crud_routes, success
from ..container import Container

EMPLOYEE_FILTERS = ("company_id", "department_id", "position_id")


def register(app: Flask, container: Container, guards: Guards) -> None:
    register_crud_routes(
        app,
        url="/api/v1/admin/employees",
        name="employee",
        collection_key="employees",
        service=container.employee_service,
        guard=guards.admin_required,
        ref_fields=EMPLOYEE_FILTERS,
    )

    @app.route("/api/v1/employees", methods=["GET"], endpoint="browse_employees")
    @guards.scope_required
    def browse_employees():
        filters, page = list_args(EMPLOYEE_FILTERS)
        employees = container.employee_service.list(filters, page, g.visibility)
        return success(page_payload("employees", employees))
