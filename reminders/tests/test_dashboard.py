from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from reminders.models import ConsumptionRecord, MedicationSchedule, Patient
from reminders.services.dashboard import dashboard_stats
from reminders.services.patients import patient_for_user
from reminders.services.schedules import todays_doses, weekly_summary
from reminders.tests.conftest import client_for, make_user

pytestmark = pytest.mark.django_db


def record(schedule, day, time, status):
    return ConsumptionRecord.objects.create(
        patient=schedule.patient, schedule=schedule, medication_name=schedule.medication_name,
        date=day, scheduled_time=time, status=status,
    )


def test_admin_stats_count_active_rows_only(admin_user, schedule, other_patient, medication):
    today = timezone.localdate()
    other_patient.is_active = False
    other_patient.save()
    record(schedule, today, '08:00', 'taken')
    record(schedule, today, '20:00', 'missed')
    stats = dashboard_stats(admin_user, today)
    assert stats == {
        'totalPatients': 1,
        'totalDoctors': 2,
        'totalMedications': 1,
        'missedToday': 1,
        'complianceToday': 50,
    }


def test_doctor_stats_cover_own_patients(doctor_user, schedule, other_patient):
    today = timezone.localdate()
    record(schedule, today - timedelta(days=1), '08:00', 'taken')
    record(schedule, today - timedelta(days=1), '20:00', 'late')
    record(schedule, today, '08:00', 'missed')
    stats = dashboard_stats(doctor_user, today)
    assert stats == {'totalPatients': 1, 'averageCompliance': 67, 'missedToday': 1, 'schedulesToday': 1}


def test_doctor_without_patients_gets_zeros(doctor_user):
    assert dashboard_stats(doctor_user) == {
        'totalPatients': 0, 'averageCompliance': 0, 'missedToday': 0, 'schedulesToday': 0,
    }


def test_patient_stats(patient_user, schedule):
    today = timezone.localdate()
    record(schedule, today - timedelta(days=2), '08:00', 'missed')
    record(schedule, today - timedelta(days=20), '08:00', 'missed')
    record(schedule, today, '08:00', 'taken')
    stats = dashboard_stats(patient_user, today)
    assert stats['schedulesToday'] == 2
    assert stats['upcomingReminders'] == 2
    assert stats['missedThisWeek'] == 1
    assert stats['compliance'] == 33


def test_patient_record_is_found_by_email(doctor):
    user = make_user('ahmad@example.com', 'patient', 'Ahmad Wijaya')
    p = Patient.objects.create(name='Ahmad Wijaya', email='AHMAD@example.com', doctor=doctor)
    assert patient_for_user(user) == p
    assert dashboard_stats(user)['compliance'] == 0


def test_patient_without_record_gets_zeros(db):
    user = make_user('ghost@example.com', 'patient')
    assert dashboard_stats(user) == {
        'schedulesToday': 0, 'compliance': 0, 'missedThisWeek': 0, 'upcomingReminders': 0,
    }


def test_todays_doses_are_sorted_with_status(patient, schedule, medication):
    today = timezone.localdate()
    morning = MedicationSchedule.objects.create(
        patient=patient, medication=medication, medication_name='Vitamin D3', dosage='1000 IU', times=['06:30'],
        start_date=today, end_date=today,
    )
    MedicationSchedule.objects.create(
        patient=patient, medication_name='Lisinopril', times=['12:00'],
        start_date=today + timedelta(days=1), end_date=today + timedelta(days=5),
    )
    record(morning, today, '06:30', 'late')
    record(schedule, today, '08:00', 'missed')
    doses = todays_doses(patient, today)
    assert [(d['time'], d['status']) for d in doses] == [
        ('06:30', 'completed'), ('08:00', 'missed'), ('20:00', 'upcoming'),
    ]
    assert doses[0]['medication'] == 'Vitamin D3 1000 IU'
    assert doses[0]['taken'] is True


def test_weekly_summary_covers_last_seven_days(patient, schedule):
    today = timezone.localdate()
    record(schedule, today, '08:00', 'taken')
    record(schedule, today - timedelta(days=1), '08:00', 'missed')
    summary = weekly_summary(patient, today)
    assert len(summary) == 7
    assert summary[-1]['date'] == today.isoformat()
    assert summary[0]['date'] == (today - timedelta(days=6)).isoformat()
    assert all(day['pills'] == 2 for day in summary)
    assert summary[-1]['completed'] == 1
    assert summary[-2]['completed'] == 0


def test_dashboard_endpoint_dispatches_on_role(admin_client, patient_client, schedule):
    admin = admin_client.get(reverse('dashboard'))
    assert admin.status_code == 200
    assert admin.data['role'] == 'admin'
    assert 'totalDoctors' in admin.data['data']
    own = patient_client.get(reverse('dashboard'))
    assert own.data['data']['schedulesToday'] == 2


def test_my_schedule_and_compliance(patient_client, doctor_client, schedule):
    resp = patient_client.get(reverse('my_schedule'))
    assert resp.status_code == 200
    assert [d['time'] for d in resp.data['data']['today']] == ['08:00', '20:00']
    assert len(resp.data['data']['week']) == 7
    assert resp.data['data']['schedules'][0]['id'] == schedule.id
    compliance = patient_client.get(reverse('my_compliance'))
    assert compliance.data['data']['complianceRate'] == 0
    assert doctor_client.get(reverse('my_schedule')).status_code == 403


def test_my_schedule_without_patient_record_is_404(db):
    client = client_for(make_user('nobody@example.com', 'patient'))
    resp = client.get(reverse('my_schedule'))
    assert resp.status_code == 404
    assert resp.data['error']['message'] == 'Profil pengguna tidak ditemukan'
