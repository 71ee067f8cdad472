from __future__ import annotations

from flask import Flask

from ..common.http import Guards, list_args, page_payload, register_crud_routes, success
from ..container import Container


def register(app: Flask, container: Container, guards: Guards) -> None:
    register_crud_routes(
        app,
        url="/api/v1/admin/project-permissions",
        name="project_permission",
        collection_key="permissions",
        service=container.project_permission_service,
        guard=guards.admin_required,
    )
    register_crud_routes(
        app,
        url="/api/v1/admin/commission-projects",
        name="commission_project",
        collection_key="projects",
        service=container.commission_project_service,
        guard=guards.admin_required,
        ref_fields=("project_perm_id",),
    )

    @app.route("/api/v1/project-permissions", methods=["GET"], endpoint="browse_project_permissions")
    @guards.scope_required
    def browse_project_permissions():
        filters, page = list_args()
        return success(page_payload("permissions", container.project_permission_service.list(filters, page)))

    @app.route("/api/v1/commission-projects", methods=["GET"], endpoint="browse_commission_projects")
    @guards.scope_required
    def browse_commission_projects():
        filters, page = list_args(("project_perm_id",))
        return success(page_payload("projects", container.commission_project_service.list(filters, page)))
