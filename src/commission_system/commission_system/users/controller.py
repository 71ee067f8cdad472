from __future__ import annotations

from flask import Flask, g

from ..common.http import Guards, json_object, register_crud_routes, success
from ..container import Container


def register(app: Flask, container: Container, guards: Guards) -> None:
    @app.route("/api/v1/login", methods=["POST"], endpoint="login")
    def login():
        payload = json_object()
        result = container.auth_service.login(payload.get("username", ""), payload.get("password", ""))
        return success({"token": result.token, "user": result.user})

    @app.route("/api/v1/profile", methods=["GET"], endpoint="get_profile")
    @guards.login_required
    def get_profile():
        return success(container.auth_service.profile(g.principal.user_id))

    @app.route("/api/v1/profile", methods=["PUT"], endpoint="update_profile")
    @guards.login_required
    def update_profile():
        return success(container.auth_service.update_profile(g.principal.user_id, json_object()))

    register_crud_routes(
        app,
        url="/api/v1/admin/users",
        name="user",
        collection_key="users",
        service=container.user_service,
        guard=guards.admin_required,
    )
