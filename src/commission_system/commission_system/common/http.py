"""Flask plumbing shared by every controller: envelopes, guards, error mapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Tuple

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from .pagination import ListFilter, PageRequest
from .serialization import to_json
from .validators import optional_id, require_report_date, require_status

if TYPE_CHECKING:
    from ..container import Container

logger = logging.getLogger(__name__)


def success(data: Any = None, *, message: str = "success", status: int = 200):
    body = {"code": status, "message": message}
    if data is not None:
        body["data"] = to_json(data)
    return jsonify(body), status


def failure(status: int, message: str):
    return jsonify({"code": status, "message": message}), status


def json_body() -> Any:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("invalid JSON payload")
    return payload


def json_object() -> dict:
    payload = json_body()
    if not isinstance(payload, dict):
        raise ValidationError("invalid JSON payload")
    return payload


def _optional_date(value: Any) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return require_report_date(value)


def list_args(ref_fields: Sequence[str] = ()) -> Tuple[ListFilter, PageRequest]:
    """Read paging, search, status, date range and foreign-key filters from the query string."""
    args = request.args
    page = PageRequest.from_args(
        args.get("page", 1),
        args.get("page_size", current_app.config.get("DEFAULT_PAGE_SIZE", 10)),
        max_page_size=int(current_app.config.get("MAX_PAGE_SIZE", 200)),
    )
    status = require_status(args["status"]) if args.get("status") not in (None, "") else None
    refs = {}
    for name in ref_fields:
        value = optional_id(args.get(name), name)
        if value is not None:
            refs[name] = value
    filters = ListFilter(
        search=(args.get("search") or "").strip() or None,
        status=status,
        refs=refs,
        start_date=_optional_date(args.get("start_date")),
        end_date=_optional_date(args.get("end_date")),
    )
    return filters, page


@dataclass(frozen=True)
class Guards:
    login_required: Callable
    admin_required: Callable
    scope_required: Callable


def make_guards(container: "Container") -> Guards:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.principal = container.authorizer.authorize(request.headers.get("Authorization"))
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if not g.principal.is_admin:
                raise AuthorizationError("admin privileges required")
            return view(*args, **kwargs)

        return wrapper

    def scope_required(view):
        """Resolve the caller's employee visibility once for the request."""

        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            g.visibility = container.scope_resolver.resolve(g.principal)
            return view(*args, **kwargs)

        return wrapper

    return Guards(login_required=login_required, admin_required=admin_required, scope_required=scope_required)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.info("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        return failure(e.status_code, str(e))

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return failure(e.code or 500, e.description or e.name)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG", False):
            return failure(500, f"internal error: {e}")
        return failure(500, "internal error")


def page_payload(key: str, page) -> dict:
    return {
        key: [to_json(item) for item in page.items],
        "total": page.total,
        "page": page.page,
        "page_size": page.page_size,
    }


def register_crud_routes(
    app: Flask,
    *,
    url: str,
    name: str,
    collection_key: str,
    service: Any,
    guard: Callable,
    ref_fields: Sequence[str] = (),
) -> None:
    """Register create/list/get/update/delete/toggle-status for one admin resource.

    ``service`` must expose create, list, get, update, delete and toggle_status.
    """

    @app.route(url, methods=["POST"], endpoint=f"create_{name}")
    @guard
    def create():
        return success(service.create(json_object()))

    @app.route(url, methods=["GET"], endpoint=f"list_{name}")
    @guard
    def list_all():
        filters, page = list_args(ref_fields)
        return success(page_payload(collection_key, service.list(filters, page)))

    @app.route(f"{url}/<int:item_id>", methods=["GET"], endpoint=f"get_{name}")
    @guard
    def get_one(item_id: int):
        return success(service.get(item_id))

    @app.route(f"{url}/<int:item_id>", methods=["PUT"], endpoint=f"update_{name}")
    @guard
    def update(item_id: int):
        return success(service.update(item_id, json_object()))

    @app.route(f"{url}/<int:item_id>", methods=["DELETE"], endpoint=f"delete_{name}")
    @guard
    def delete(item_id: int):
        service.delete(item_id)
        return success({"message": f"{name.replace('_', ' ')} deleted"})

    @app.route(f"{url}/<int:item_id>/toggle-status", methods=["PUT"], endpoint=f"toggle_{name}_status")
    @guard
    def toggle_status(item_id: int):
        return success(service.toggle_status(item_id))
