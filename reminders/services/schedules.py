"""
Medication schedule helpers.

Schedules hold a list of ``HH:MM`` strings; every (schedule, time) pair
on a day inside the schedule's date range is one dose.  Doses are
matched to consumption records by schedule, date and scheduled time.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta

from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied

from reminders.models import ConsumptionRecord, Doctor, Medication, MedicationSchedule, Patient
from reminders.services.patients import patients_visible_to

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ('Sen', 'Sel', 'Rab', 'Kam', 'Jum', 'Sab', 'Min')


def format_schedule(s: MedicationSchedule) -> dict:
    return {
        'id': s.id,
        'patientId': s.patient_id,
        'patientName': s.patient.name if s.patient_id else None,
        'medicationId': s.medication_id,
        'medicationName': s.medication_name,
        'dosage': s.dosage,
        'times': list(s.times or []),
        'startDate': s.start_date.isoformat(),
        'endDate': s.end_date.isoformat(),
        'instructions': s.instructions,
        'isActive': s.is_active,
        'prescribedBy': s.prescribed_by_id,
        'prescribedByName': s.prescribed_by_name,
        'createdAt': s.created_at.isoformat() if s.created_at else None,
        'updatedAt': s.updated_at.isoformat() if s.updated_at else None,
    }


def apply_schedule_fields(schedule: MedicationSchedule, data: dict) -> MedicationSchedule:
    """Copy validated input onto ``schedule`` and refresh the denormalized names."""
    if 'patient' in data:
        schedule.patient = data['patient']
    if 'medication' in data:
        medication: Medication | None = data['medication']
        schedule.medication = medication
        if medication is not None:
            schedule.medication_name = medication.name
            schedule.dosage = data.get('dosage') or medication.dosage
    if 'prescribedBy' in data:
        doctor: Doctor | None = data['prescribedBy']
        schedule.prescribed_by = doctor
        schedule.prescribed_by_name = doctor.name if doctor else ''
    for key, attr in (('medicationName', 'medication_name'), ('dosage', 'dosage'), ('times', 'times'),
                      ('startDate', 'start_date'), ('endDate', 'end_date'),
                      ('instructions', 'instructions'), ('isActive', 'is_active')):
        value = data.get(key)
        if value is None:
            continue
        # a blank name or dosage keeps what the referenced medication supplied
        if value == '' and key in ('medicationName', 'dosage') and data.get('medication') is not None:
            continue
        setattr(schedule, attr, value)
    if schedule.times:
        schedule.times = sorted(set(schedule.times))
    return schedule


def delete_schedule(schedule: MedicationSchedule, *, hard: bool = False) -> None:
    """Deactivate ``schedule``; with ``hard`` remove its records and then itself."""
    if not hard:
        schedule.is_active = False
        schedule.save(update_fields=['is_active', 'updated_at'])
        return
    deleted, _ = ConsumptionRecord.objects.filter(schedule_id=schedule.id).delete()
    logger.info("Removed %s consumption records of schedule %s", deleted, schedule.id)
    schedule.delete()


def active_schedules_on(patient: Patient, day: date) -> list[MedicationSchedule]:
    qs = MedicationSchedule.objects.active().filter(
        patient=patient, start_date__lte=day, end_date__gte=day,
    )
    return list(qs.order_by('id'))


def doses_on(schedules, day: date) -> int:
    return sum(len(s.times or []) for s in schedules if s.covers(day))


def todays_doses(patient: Patient, today: date) -> list[dict]:
    """Every dose due on ``today`` with its completion status, earliest first."""
    schedules = active_schedules_on(patient, today)
    records = {
        (r.schedule_id, r.scheduled_time): r
        for r in ConsumptionRecord.objects.filter(patient=patient, date=today, schedule__in=schedules)
    }
    doses = []
    for s in schedules:
        for t in s.times or []:
            record = records.get((s.id, t))
            if record is None:
                state = 'upcoming'
            elif record.status in ConsumptionRecord.TAKEN_STATUSES:
                state = 'completed'
            else:
                state = 'missed'
            doses.append({
                'scheduleId': s.id,
                'time': t,
                'medication': f"{s.medication_name} {s.dosage}".strip(),
                'instruction': s.instructions,
                'status': state,
                'taken': state == 'completed',
                'recordId': record.id if record else None,
            })
    doses.sort(key=lambda d: (d['time'], d['scheduleId']))
    return doses


def weekly_summary(patient: Patient, today: date) -> list[dict]:
    """Scheduled and completed dose counts for the 7 days ending ``today``."""
    start = today - timedelta(days=6)
    schedules = list(MedicationSchedule.objects.active().filter(
        patient=patient, start_date__lte=today, end_date__gte=start,
    ))
    completed: dict[date, int] = {}
    for day in ConsumptionRecord.objects.filter(
        patient=patient, date__gte=start, date__lte=today,
        status__in=ConsumptionRecord.TAKEN_STATUSES,
    ).values_list('date', flat=True):
        completed[day] = completed.get(day, 0) + 1
    summary = []
    for offset in range(7):
        day = start + timedelta(days=offset)
        summary.append({
            'date': day.isoformat(),
            'day': WEEKDAY_LABELS[day.weekday()],
            'pills': doses_on(schedules, day),
            'completed': completed.get(day, 0),
        })
    return summary


@transaction.atomic
def create_schedule(data: dict) -> MedicationSchedule:
    schedule = apply_schedule_fields(MedicationSchedule(), data)
    schedule.save()
    return schedule


def schedules_visible_to(user, *, include_inactive: bool = False):
    qs = MedicationSchedule.objects.select_related('patient')
    if not include_inactive:
        qs = qs.filter(is_active=True)
    if getattr(user, 'role', '') == 'admin':
        return qs
    return qs.filter(patient__in=patients_visible_to(user))


def get_schedule_for(user, schedule_id: int) -> MedicationSchedule:
    obj = MedicationSchedule.objects.select_related('patient').filter(id=schedule_id).first()
    if obj is None:
        raise NotFound('schedule not found')
    if getattr(user, 'role', '') == 'admin':
        return obj
    if not patients_visible_to(user).filter(id=obj.patient_id).exists():
        raise PermissionDenied('forbidden for this schedule')
    return obj
