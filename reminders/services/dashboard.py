"""
Dashboard statistics per role.

Each role sees a different set of counters; ``dashboard_stats``
dispatches on the role of the requesting user.  Dates are evaluated in
the project time zone.
"""
from __future__ import annotations

from datetime import date, timedelta

from django.utils import timezone

from reminders.models import ConsumptionRecord, Doctor, Medication, MedicationSchedule, Patient
from reminders.services.compliance import compliance_by_patient, compliance_rate, percentage
from reminders.services.patients import doctor_for_user, patient_for_user
from reminders.services.schedules import active_schedules_on, doses_on


def admin_stats(today: date) -> dict:
    today_records = list(ConsumptionRecord.objects.filter(date=today).values_list('status', flat=True))
    return {
        'totalPatients': Patient.objects.active().count(),
        'totalDoctors': Doctor.objects.active().count(),
        'totalMedications': Medication.objects.active().count(),
        'missedToday': today_records.count(ConsumptionRecord.STATUS_MISSED),
        'complianceToday': compliance_rate({'status': s} for s in today_records),
    }


def doctor_stats(doctor: Doctor | None, today: date) -> dict:
    empty = {'totalPatients': 0, 'averageCompliance': 0, 'missedToday': 0, 'schedulesToday': 0}
    if doctor is None:
        return empty
    patient_ids = list(Patient.objects.active().filter(doctor=doctor).values_list('id', flat=True))
    if not patient_ids:
        return empty
    rates = compliance_by_patient(patient_ids)
    missed_today = ConsumptionRecord.objects.filter(
        patient_id__in=patient_ids, date=today, status=ConsumptionRecord.STATUS_MISSED,
    ).count()
    schedules_today = MedicationSchedule.objects.active().filter(patient_id__in=patient_ids).count()
    return {
        'totalPatients': len(patient_ids),
        'averageCompliance': percentage(sum(rates.values()), 100 * len(patient_ids)),
        'missedToday': missed_today,
        'schedulesToday': schedules_today,
    }


def patient_stats(patient: Patient | None, today: date) -> dict:
    if patient is None:
        return {'schedulesToday': 0, 'compliance': 0, 'missedThisWeek': 0, 'upcomingReminders': 0}
    schedules_today = doses_on(active_schedules_on(patient, today), today)
    week_ago = today - timedelta(days=7)
    missed_this_week = ConsumptionRecord.objects.filter(
        patient=patient, date__gte=week_ago, status=ConsumptionRecord.STATUS_MISSED,
    ).count()
    return {
        'schedulesToday': schedules_today,
        'compliance': compliance_rate(patient.consumption_records.only('status')),
        'missedThisWeek': missed_this_week,
        'upcomingReminders': schedules_today,
    }


def dashboard_stats(user, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    role = getattr(user, 'role', '')
    if role == 'admin':
        return admin_stats(today)
    if role == 'doctor':
        return doctor_stats(doctor_for_user(user), today)
    if role == 'patient':
        return patient_stats(patient_for_user(user), today)
    return {}
