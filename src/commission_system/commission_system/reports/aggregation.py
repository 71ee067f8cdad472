"""Monthly commission roll-up.

Totals are exact ``Decimal`` sums, so equal inputs always give equal outputs
regardless of summation order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from ..access.scope import Visibility
from ..common.datetime_utils import month_range
from .model import MonthlySummary, ReportSummaryInput, SummaryRow
from .repository import ReportRepository

logger = logging.getLogger(__name__)

GroupKey = Tuple[int, int]


@dataclass
class _Group:
    latest: ReportSummaryInput
    total: Decimal

    def add(self, row: ReportSummaryInput) -> None:
        self.total += row.commission_value
        # Display fields follow the most recent report of the group.
        if (row.date, row.report_id) > (self.latest.date, self.latest.report_id):
            self.latest = row

    def to_row(self) -> SummaryRow:
        r = self.latest
        return SummaryRow(
            employee_id=r.employee_id,
            employee_name=r.employee_name,
            company_id=r.company_id,
            company_name=r.company_name,
            department_id=r.department_id,
            department_name=r.department_name,
            position_id=r.position_id,
            position_name=r.position_name,
            commission_project_id=r.commission_project_id,
            project_name=r.project_name,
            total_value=self.total,
        )


def _sort_key(row: SummaryRow) -> tuple:
    return (row.employee_name or "", row.project_name or "", row.employee_id, row.commission_project_id)


class AggregationEngine:
    """Per-(employee, commission project) totals for one calendar month."""

    def __init__(self, reports: ReportRepository):
        self._reports = reports

    def monthly_summary(self, month: Optional[str], visibility: Visibility = Visibility.everyone()) -> MonthlySummary:
        period = month_range(month)

        rows = self._reports.list_active_in_range(
            start_date=period.start_date,
            end_date=period.end_date,
            employee_ids=visibility.filter_ids(),
        )

        groups: Dict[GroupKey, _Group] = {}
        for row in rows:
            # The store already filters; re-checking keeps the result identical
            # for stores that ignore the id filter.
            if not visibility.allows(row.employee_id):
                continue
            key = (row.employee_id, row.commission_project_id)
            group = groups.get(key)
            if group is None:
                groups[key] = _Group(latest=row, total=Decimal(row.commission_value))
            else:
                group.add(row)

        summaries = sorted((g.to_row() for g in groups.values()), key=_sort_key)
        logger.debug("monthly summary %s: %d report(s) -> %d row(s)", period.month, len(rows), len(summaries))
        return MonthlySummary(
            month=period.month,
            start_date=period.start_date,
            end_date=period.end_date,
            summaries=tuple(summaries),
        )
