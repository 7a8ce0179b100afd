"""
In-memory aggregation of openFDA results.

Every function here is pure: it takes already-fetched reports (and, for the
manufacturer ranking, Drugs@FDA records) and returns new values without
touching the network or mutating its inputs.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from fda_insights.constants import SERIOUS_FLAG, SERIOUS_FLAG_FIELDS, UNKNOWN_PHARM_CLASS
from fda_insights.helpers.drug_helpers import display_name, drug_key, drug_slug
from fda_insights.models.model_openfda import AdverseEventReport, DrugInfo, EventDrug
from fda_insights.models.model_summary import (
    DrugSummary,
    EventCounts,
    ManufacturerCount,
    MonthlyCount,
)

logger = logging.getLogger(__name__)


def is_serious(report: AdverseEventReport) -> bool:
    """True if the overall flag or any death/hospitalization/life-threatening flag is "1"."""
    return any(getattr(report, field) == SERIOUS_FLAG for field in SERIOUS_FLAG_FIELDS)


def count_serious(reports: Iterable[AdverseEventReport]) -> int:
    return sum(1 for report in reports if is_serious(report))


def _named_drugs(
    reports: Iterable[AdverseEventReport],
) -> Iterable[tuple[AdverseEventReport, str, EventDrug]]:
    """Yield (report, lowercase drug name, drug) for every drug with a product name."""
    for report in reports:
        for drug in report.patient.drug:
            if drug.medicinalproduct:
                yield report, drug_key(drug.medicinalproduct), drug


def count_events_by_drug(
    reports: Iterable[AdverseEventReport],
) -> dict[str, EventCounts]:
    """Count total and serious events per lowercase drug name.

    A report naming the same drug twice counts twice, once per drug entry.
    """
    counts: dict[str, EventCounts] = {}
    for report, name, _ in _named_drugs(reports):
        entry = counts.setdefault(name, EventCounts())
        entry.total += 1
        if is_serious(report):
            entry.serious += 1
    return counts


def collect_routes_and_classes(
    reports: Iterable[AdverseEventReport],
) -> tuple[dict[str, set[str]], dict[str, str]]:
    """Collect administration routes and a pharmacological class per drug name.

    Returns (routes, classes).  Routes are deduplicated sets; the class is the
    first non-empty `openfda.pharm_class_epc` entry seen for the drug.
    """
    routes: dict[str, set[str]] = {}
    classes: dict[str, str] = {}
    for _, name, drug in _named_drugs(reports):
        drug_routes = routes.setdefault(name, set())
        if drug.drugadministrationroute:
            drug_routes.add(drug.drugadministrationroute)
        if name not in classes and drug.openfda and drug.openfda.pharm_class_epc:
            pharm_class = drug.openfda.pharm_class_epc[0]
            if pharm_class:
                classes[name] = pharm_class
    return routes, classes


def build_drug_summaries(reports: list[AdverseEventReport]) -> list[DrugSummary]:
    """Combine event counts, routes and classes into cards, most-reported first."""
    counts = count_events_by_drug(reports)
    routes, classes = collect_routes_and_classes(reports)

    summaries = [
        DrugSummary(
            drug_name=display_name(name),
            total_events=entry.total,
            serious_events=entry.serious,
            administration_routes=sorted(routes.get(name, ())),
            pharmacological_class=classes.get(name, UNKNOWN_PHARM_CLASS),
            drug_slug=drug_slug(name),
        )
        for name, entry in counts.items()
    ]
    return sorted(summaries, key=lambda s: s.total_events, reverse=True)


def _ranked(counts: Counter[str]) -> list[ManufacturerCount]:
    # sorted() is stable, so ties keep first-seen order
    return [
        ManufacturerCount(manufacturer=name, count=count)
        for name, count in sorted(counts.items(), key=lambda item: item[1], reverse=True)
    ]


def get_manufacturer_data(
    reports: Iterable[AdverseEventReport],
) -> list[ManufacturerCount]:
    """Count manufacturer mentions across every drug of every report."""
    counts: Counter[str] = Counter()
    for report in reports:
        for drug in report.patient.drug:
            if drug.openfda:
                counts.update(drug.openfda.manufacturer_name)
    return _ranked(counts)


def merge_manufacturer_counts(
    event_counts: Iterable[ManufacturerCount],
    drug_infos: Iterable[DrugInfo],
) -> list[ManufacturerCount]:
    """Add one per Drugs@FDA record to its sponsor's event-level count.

    Counts from the two sources are summed, so a sponsor that also appears
    as an event-level manufacturer gets both contributions.
    """
    counts: Counter[str] = Counter()
    for item in event_counts:
        counts[item.manufacturer] += item.count
    for info in drug_infos:
        if info.sponsor_name:
            counts[info.sponsor_name] += 1
    return _ranked(counts)


def parse_month(receivedate: str) -> str | None:
    """Return the "YYYY-MM" bucket for an openFDA date, or None if unparseable.

    openFDA sends YYYYMMDD; ISO dates (with or without a time part) are
    accepted as well.
    """
    value = receivedate.strip()
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y%m%d")
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def get_time_series_data(
    reports: Iterable[AdverseEventReport],
) -> list[MonthlyCount]:
    """Count reports per received month, oldest first.

    Zero-padded "YYYY-MM" keys sort chronologically as plain strings.
    """
    counts: Counter[str] = Counter()
    for report in reports:
        month = parse_month(report.receivedate)
        if month is None:
            logger.debug(
                "Skipping report %s with unparseable receivedate %r",
                report.safetyreportid,
                report.receivedate,
            )
            continue
        counts[month] += 1
    return [MonthlyCount(month=month, count=counts[month]) for month in sorted(counts)]
