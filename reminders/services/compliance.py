"""
Compliance arithmetic over consumption records.

A dose counts towards compliance when it was taken, on time or late.
The functions accept any iterable of objects (or dicts) exposing a
``status`` so they work on querysets and on plain lists alike.
"""
from __future__ import annotations

from typing import Iterable

from django.db.models import Count, Q

from reminders.models import ConsumptionRecord

TAKEN = ConsumptionRecord.TAKEN_STATUSES


def _status(record) -> str:
    if isinstance(record, dict):
        return record.get('status', '')
    return getattr(record, 'status', '')


def percentage(part: int, total: int) -> int:
    """``round(100 * part / total)`` with halves rounded up; 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


def compliance_rate(records: Iterable) -> int:
    statuses = [_status(r) for r in records]
    return percentage(sum(1 for s in statuses if s in TAKEN), len(statuses))


def status_breakdown(records: Iterable) -> dict:
    statuses = [_status(r) for r in records]
    taken = statuses.count(ConsumptionRecord.STATUS_TAKEN)
    late = statuses.count(ConsumptionRecord.STATUS_LATE)
    return {
        'total': len(statuses),
        'taken': taken,
        'late': late,
        'missed': statuses.count(ConsumptionRecord.STATUS_MISSED),
        'complianceRate': percentage(taken + late, len(statuses)),
    }


def patient_compliance_rate(patient_id: int) -> int:
    counts = ConsumptionRecord.objects.filter(patient_id=patient_id).aggregate(
        total=Count('id'),
        taken=Count('id', filter=Q(status__in=TAKEN)),
    )
    return percentage(counts['taken'], counts['total'])


def compliance_by_patient(patient_ids: list[int]) -> dict[int, int]:
    """Compliance rate per patient id; patients without records get 0."""
    rows = (ConsumptionRecord.objects.filter(patient_id__in=patient_ids)
            .values('patient_id')
            .annotate(total=Count('id'), taken=Count('id', filter=Q(status__in=TAKEN))))
    rates = {pid: 0 for pid in patient_ids}
    for row in rows:
        rates[row['patient_id']] = percentage(row['taken'], row['total'])
    return rates
