from __future__ import annotations

from flask import Flask

from ..common.http import Guards, list_args, page_payload, register_crud_routes, success
from ..container import Container


def register(app: Flask, container: Container, guards: Guards) -> None:
    register_crud_routes(
        app,
        url="/api/v1/admin/companies",
        name="company",
        collection_key="companies",
        service=container.company_service,
        guard=guards.admin_required,
    )
    register_crud_routes(
        app,
        url="/api/v1/admin/departments",
        name="department",
        collection_key="departments",
        service=container.department_service,
        guard=guards.admin_required,
        ref_fields=("company_id",),
    )
    register_crud_routes(
        app,
        url="/api/v1/admin/positions",
        name="position",
        collection_key="positions",
        service=container.position_service,
        guard=guards.admin_required,
    )

    # Read-only reference data for scoped users.
    @app.route("/api/v1/companies", methods=["GET"], endpoint="browse_companies")
    @guards.scope_required
    def browse_companies():
        filters, page = list_args()
        return success(page_payload("companies", container.company_service.list(filters, page)))

    @app.route("/api/v1/departments", methods=["GET"], endpoint="browse_departments")
    @guards.scope_required
    def browse_departments():
        filters, page = list_args(("company_id",))
        return success(page_payload("departments", container.department_service.list(filters, page)))

    @app.route("/api/v1/positions", methods=["GET"], endpoint="browse_positions")
    @guards.scope_required
    def browse_positions():
        filters, page = list_args()
        return success(page_payload("positions", container.position_service.list(filters, page)))
