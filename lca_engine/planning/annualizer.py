"""Annualisation of partial-year metered data."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from lca_engine.engine.result import AnnualizationResult
from lca_engine.engine.units import normalize_unit
from lca_engine.models.enums import AnnualizationConfidence
from lca_engine.models.material import MeteredEntry

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


def confidence_tier(months_covered: int) -> AnnualizationConfidence:
    """Map months of data to a confidence tier.

    1-3  -> LOW (1)
    4-8  -> MODERATE (2)
    9-11 -> HIGH (3)
    12   -> COMPLETE (4)
    """
    if not 1 <= months_covered <= MONTHS_PER_YEAR:
        raise ValueError(f"months_covered must be 1-12, got {months_covered}")
    if months_covered == MONTHS_PER_YEAR:
        return AnnualizationConfidence.COMPLETE
    if months_covered >= 9:
        return AnnualizationConfidence.HIGH
    if months_covered >= 4:
        return AnnualizationConfidence.MODERATE
    return AnnualizationConfidence.LOW


def _period_index(entry_date: date, start: date) -> int:
    """Zero-based month of the window that contains ``entry_date``.

    Window months run from ``start.day`` to the day before it in the next
    calendar month, so a year starting on 6 April ends on 5 April.
    """
    offset = (entry_date.year - start.year) * MONTHS_PER_YEAR + entry_date.month - start.month
    if entry_date.day < start.day:
        offset -= 1
    return offset


def _period_label(start: date, index: int) -> str:
    year, month = divmod(start.month - 1 + index, MONTHS_PER_YEAR)
    return f"{start.year + year:04d}-{month + 1:02d}"


class Annualizer:
    """Projects partial financial-year series to full-year estimates.

    Entries are grouped by metric key. When fewer than 12 distinct months are
    covered the estimate is ``monthly_average * 12`` and flagged as a
    projection; a full year reports the raw sum.
    """

    def annualize(
        self,
        entries: Iterable[MeteredEntry],
        financial_year_start: Optional[date] = None,
    ) -> dict[str, AnnualizationResult]:
        """Annualise every metric.

        ``financial_year_start`` fixes the 12-month window; without it each
        metric's window starts at the month of its earliest entry. Entries
        outside the window are ignored. Metrics with no entries in the window
        are absent from the result.
        """
        grouped: dict[str, list[MeteredEntry]] = defaultdict(list)
        for entry in entries:
            grouped[entry.metric_key].append(entry)

        results: dict[str, AnnualizationResult] = {}
        for metric_key in sorted(grouped):
            result = self._annualize_metric(metric_key, grouped[metric_key], financial_year_start)
            if result is not None:
                results[metric_key] = result
        return results

    def _annualize_metric(
        self,
        metric_key: str,
        entries: list[MeteredEntry],
        financial_year_start: Optional[date],
    ) -> Optional[AnnualizationResult]:
        start = financial_year_start or min(e.entry_date for e in entries).replace(day=1)
        indexed = [(_period_index(e.entry_date, start), e) for e in entries]
        in_window = [(i, e) for i, e in indexed if 0 <= i < MONTHS_PER_YEAR]
        ignored = len(entries) - len(in_window)
        if ignored:
            logger.info(f"Ignored {ignored} '{metric_key}' entries outside the 12-month window")
        if not in_window:
            return None

        metric_units = {normalize_unit(e.unit) for _, e in in_window}
        if len(metric_units) > 1:
            logger.warning(
                f"Skipping metric '{metric_key}': inconsistent units {sorted(metric_units)}"
            )
            return None

        months = sorted({i for i, _ in in_window})
        months_covered = len(months)
        total = math.fsum(e.quantity for _, e in in_window)
        monthly_average = total / months_covered

        if months_covered == MONTHS_PER_YEAR:
            estimate = total
            is_projection = False
        else:
            estimate = monthly_average * MONTHS_PER_YEAR
            is_projection = True

        return AnnualizationResult(
            metric_key=metric_key,
            unit=metric_units.pop(),
            total_recorded=total,
            monthly_average=monthly_average,
            annualized_estimate=estimate,
            months_covered=months_covered,
            is_projection=is_projection,
            confidence_tier=int(confidence_tier(months_covered)),
            months=tuple(_period_label(start, index) for index in months),
        )
