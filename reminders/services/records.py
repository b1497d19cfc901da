"""
Consumption record helpers.
"""
from __future__ import annotations

from django.conf import settings

from reminders.models import ConsumptionRecord, MedicationSchedule


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(':')
    return int(hours) * 60 + int(minutes)


def derive_status(scheduled_time: str, actual_time: str | None, grace_minutes: int | None = None) -> str:
    """Status of a dose from when it was due and when (if ever) it was taken."""
    if not actual_time:
        return ConsumptionRecord.STATUS_MISSED
    if grace_minutes is None:
        grace_minutes = settings.LATE_GRACE_MINUTES
    if _minutes(actual_time) - _minutes(scheduled_time) <= grace_minutes:
        return ConsumptionRecord.STATUS_TAKEN
    return ConsumptionRecord.STATUS_LATE


def format_record(r: ConsumptionRecord) -> dict:
    return {
        'id': r.id,
        'patientId': r.patient_id,
        'patientName': r.patient.name if r.patient_id else None,
        'scheduleId': r.schedule_id,
        'medicationName': r.medication_name,
        'date': r.date.isoformat(),
        'scheduledTime': r.scheduled_time,
        'actualTime': r.actual_time,
        'status': r.status,
        'notes': r.notes,
        'reminderSent': r.reminder_sent,
        'createdAt': r.created_at.isoformat() if r.created_at else None,
    }


def create_record(schedule: MedicationSchedule, *, date, scheduled_time: str,
                  actual_time: str | None = None, status: str | None = None,
                  notes: str | None = None) -> ConsumptionRecord:
    return ConsumptionRecord.objects.create(
        patient_id=schedule.patient_id,
        schedule=schedule,
        medication_name=schedule.medication_name,
        date=date,
        scheduled_time=scheduled_time,
        actual_time=actual_time or None,
        status=status or derive_status(scheduled_time, actual_time),
        notes=notes or None,
    )


def update_record(record: ConsumptionRecord, data: dict) -> ConsumptionRecord:
    if 'actualTime' in data:
        record.actual_time = data['actualTime'] or None
    if 'notes' in data:
        record.notes = data['notes'] or None
    if data.get('status'):
        record.status = data['status']
    elif 'actualTime' in data:
        record.status = derive_status(record.scheduled_time, record.actual_time)
    record.save()
    return record
