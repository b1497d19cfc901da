"""
Free-text filters for the list endpoints.

Each function narrows a queryset with a case-insensitive substring
match over the columns the corresponding list page searches.  An empty
term returns the queryset unchanged.
"""
from __future__ import annotations

from django.db.models import Q, QuerySet


def _term(q: str | None) -> str:
    return (q or '').strip()


def _in_json_list(qs: QuerySet, field: str, term: str) -> list[int]:
    """Ids of rows where any string in the JSON list ``field`` contains ``term``."""
    needle = term.lower()
    return [
        pk for pk, values in qs.values_list('id', field)
        if any(needle in str(v).lower() for v in (values or []))
    ]


def search_patients(qs: QuerySet, q: str | None) -> QuerySet:
    term = _term(q)
    if not term:
        return qs
    cond = Q(name__icontains=term) | Q(email__icontains=term)
    if term.isdigit():
        cond |= Q(id=int(term))
    # JSON containment differs between backends, so conditions are matched in Python.
    cond |= Q(id__in=_in_json_list(qs, 'medical_conditions', term))
    return qs.filter(cond)


def search_doctors(qs: QuerySet, q: str | None) -> QuerySet:
    term = _term(q)
    if not term:
        return qs
    return qs.filter(
        Q(name__icontains=term)
        | Q(email__icontains=term)
        | Q(specialization__icontains=term)
        | Q(license_number__icontains=term)
    )


def search_medications(qs: QuerySet, q: str | None) -> QuerySet:
    term = _term(q)
    if not term:
        return qs
    return qs.filter(Q(name__icontains=term) | Q(category__icontains=term))


def search_schedules(qs: QuerySet, q: str | None) -> QuerySet:
    term = _term(q)
    if not term:
        return qs
    return qs.filter(
        Q(medication_name__icontains=term)
        | Q(patient__name__icontains=term)
        | Q(prescribed_by_name__icontains=term)
        | Q(instructions__icontains=term)
    )


def search_records(qs: QuerySet, q: str | None) -> QuerySet:
    term = _term(q)
    if not term:
        return qs
    cond = (
        Q(medication_name__icontains=term)
        | Q(patient__name__icontains=term)
        | Q(status__icontains=term)
    )
    # dates are matched on their ISO text, e.g. "2024-05" matches the whole month
    matching_dates = [
        d for d in qs.order_by().values_list('date', flat=True).distinct() if term in d.isoformat()
    ]
    if matching_dates:
        cond |= Q(date__in=matching_dates)
    return qs.filter(cond)
