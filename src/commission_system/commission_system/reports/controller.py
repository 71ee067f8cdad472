from __future__ import annotations

from flask import Flask, g, request

from ..access.scope import Visibility
from ..common.http import Guards, json_body, json_object, list_args, page_payload, success
from ..container import Container

REPORT_FILTERS = ("employee_id", "company_id", "department_id", "commission_project_id")


def register(app: Flask, container: Container, guards: Guards) -> None:
    reports = container.report_service

    def _summary(visibility):
        summary = container.aggregation_engine.monthly_summary(request.args.get("month"), visibility)
        return success(summary)

    # -------- Admin --------
    @app.route("/api/v1/admin/reports/monthly-summary", methods=["GET"], endpoint="admin_monthly_summary")
    @guards.admin_required
    def admin_monthly_summary():
        return _summary(Visibility.everyone())

    @app.route("/api/v1/admin/reports", methods=["GET"], endpoint="admin_list_reports")
    @guards.admin_required
    def admin_list_reports():
        filters, page = list_args(REPORT_FILTERS)
        return success(page_payload("reports", reports.list(filters, page)))

    @app.route("/api/v1/admin/reports/<int:report_id>", methods=["GET"], endpoint="admin_get_report")
    @guards.admin_required
    def admin_get_report(report_id: int):
        return success(reports.get(report_id))

    @app.route("/api/v1/admin/reports/<int:report_id>", methods=["PUT"], endpoint="admin_update_report")
    @guards.admin_required
    def admin_update_report(report_id: int):
        return success(reports.update(report_id, json_object()))

    @app.route("/api/v1/admin/reports/<int:report_id>", methods=["DELETE"], endpoint="admin_delete_report")
    @guards.admin_required
    def admin_delete_report(report_id: int):
        reports.delete(report_id)
        return success({"message": "report deleted"})

    @app.route(
        "/api/v1/admin/reports/<int:report_id>/toggle-status",
        methods=["PUT"],
        endpoint="admin_toggle_report_status",
    )
    @guards.admin_required
    def admin_toggle_report_status(report_id: int):
        return success(reports.toggle_status(report_id))

    # -------- Scoped users --------
    @app.route("/api/v1/reports", methods=["POST"], endpoint="submit_report")
    @guards.scope_required
    def submit_report():
        return success(reports.create(json_object(), g.visibility))

    @app.route("/api/v1/reports/batch", methods=["POST"], endpoint="submit_report_batch")
    @guards.scope_required
    def submit_report_batch():
        count = reports.batch_create(json_body(), g.visibility)
        return success({"message": "batch created", "count": count})

    @app.route("/api/v1/my-reports/monthly-summary", methods=["GET"], endpoint="my_monthly_summary")
    @guards.scope_required
    def my_monthly_summary():
        return _summary(g.visibility)

    @app.route("/api/v1/my-reports", methods=["GET"], endpoint="my_reports")
    @guards.scope_required
    def my_reports():
        filters, page = list_args(REPORT_FILTERS)
        return success(page_payload("reports", reports.list(filters, page, g.visibility)))

    @app.route("/api/v1/my-reports/<int:report_id>", methods=["GET"], endpoint="my_report")
    @guards.scope_required
    def my_report(report_id: int):
        return success(reports.get(report_id, g.visibility))
