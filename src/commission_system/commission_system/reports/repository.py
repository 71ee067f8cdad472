from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from ..common.pagination import ListFilter, Page, PageRequest
from .model import NewReport, Report, ReportSummaryInput


class ReportRepository(Protocol):
    def get_by_id(self, report_id: int) -> Optional[Report]:
        raise NotImplementedError

    def count_by(self, column: str, value: int) -> int:
        """Countable by ``employee_id`` or ``commission_project_id``."""

        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Report]:
        """Newest date first. ``filters.employee_ids`` restricts when set."""

        raise NotImplementedError

    def create(self, report: NewReport) -> int:
        raise NotImplementedError

    def create_many(self, reports: Sequence[NewReport]) -> int:
        raise NotImplementedError

    def update(self, report_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, report_id: int) -> bool:
        raise NotImplementedError

    def list_active_in_range(
        self,
        *,
        start_date: str,
        end_date: str,
        employee_ids: Optional[frozenset[int]] = None,
    ) -> Sequence[ReportSummaryInput]:
        """Active reports with ``start_date <= date <= end_date``.

        Names are left-joined; a missing company/department/position/project
        yields None instead of dropping the report.
        """

        raise NotImplementedError
