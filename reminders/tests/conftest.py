from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from reminders.models import Doctor, Medication, MedicationSchedule, Patient, User

PASSWORD = 'P@ssw0rd1'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


def make_user(email, role, name=None, **extra):
    return User.objects.create_user(
        username=email, email=email, password=PASSWORD, role=role, name=name or email.split('@')[0], **extra
    )


def client_for(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_user(db):
    return make_user('admin@example.com', 'admin', 'Administrator')


@pytest.fixture
def doctor_user(db):
    user = make_user('dr.chen@example.com', 'doctor', 'Dr. Chen', specialization='Penyakit Dalam',
                     license_number='STR-1')
    Doctor.objects.create(user=user, name=user.name, email=user.email, specialization='Penyakit Dalam',
                          license_number='STR-1')
    return user


@pytest.fixture
def doctor(doctor_user):
    return doctor_user.doctor_profile


@pytest.fixture
def other_doctor(db):
    return Doctor.objects.create(name='Dr. Wilson', email='wilson@example.com', specialization='Kardiologi',
                                 license_number='STR-2')


@pytest.fixture
def patient_user(db):
    return make_user('john@example.com', 'patient', 'John Smith')


@pytest.fixture
def patient(patient_user, doctor):
    return Patient.objects.create(
        user=patient_user, name='John Smith', email=patient_user.email, gender='Laki-laki', age=45,
        medical_conditions=['Hipertensi', 'Diabetes Tipe 2'], doctor=doctor, doctor_name=doctor.name,
    )


@pytest.fixture
def other_patient(other_doctor):
    return Patient.objects.create(
        name='Maria Garcia', email='maria@example.com', gender='Perempuan', age=38,
        medical_conditions=['Asma'], doctor=other_doctor, doctor_name=other_doctor.name,
    )


@pytest.fixture
def medication(db):
    return Medication.objects.create(name='Metformin', dosage='500mg', frequency='2x sehari',
                                     category='Antidiabetes', stock_quantity=100)


@pytest.fixture
def schedule(patient, medication, doctor):
    today = timezone.localdate()
    return MedicationSchedule.objects.create(
        patient=patient, medication=medication, medication_name=medication.name, dosage=medication.dosage,
        times=['08:00', '20:00'], start_date=today - timedelta(days=10), end_date=today + timedelta(days=10),
        instructions='Diminum setelah makan', prescribed_by=doctor, prescribed_by_name=doctor.name,
    )


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def doctor_client(doctor_user):
    return client_for(doctor_user)


@pytest.fixture
def patient_client(patient_user):
    return client_for(patient_user)
