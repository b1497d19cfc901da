import logging

from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied

from reminders.models import ConsumptionRecord, Doctor, MedicationSchedule, Patient

logger = logging.getLogger(__name__)


def doctor_for_user(user) -> Doctor | None:
    if getattr(user, 'role', '') != 'doctor':
        return None
    return Doctor.objects.filter(user=user, is_active=True).first()


def patient_for_user(user) -> Patient | None:
    """The patient record of a patient account: linked first, then by email."""
    if getattr(user, 'role', '') != 'patient':
        return None
    patient = Patient.objects.active().filter(user=user).first()
    if patient is None and user.email:
        patient = Patient.objects.active().filter(email__iexact=user.email).order_by('id').first()
    return patient


def patients_visible_to(user, *, include_inactive: bool = False):
    """Queryset of the patients ``user`` may see."""
    qs = Patient.objects.select_related('doctor')
    if not include_inactive:
        qs = qs.filter(is_active=True)
    role = getattr(user, 'role', '')
    if role == 'admin':
        return qs
    if role == 'doctor':
        doctor = doctor_for_user(user)
        return qs.filter(doctor=doctor) if doctor else qs.none()
    if role == 'patient':
        own = patient_for_user(user)
        return qs.filter(id=own.id) if own else qs.none()
    return qs.none()


def get_patient_for(user, patient_id: int) -> Patient:
    obj = Patient.objects.select_related('doctor').filter(id=patient_id).first()
    if obj is None:
        raise NotFound('patient not found')
    if getattr(user, 'role', '') == 'admin':
        return obj
    if not patients_visible_to(user).filter(id=obj.id).exists():
        raise PermissionDenied('forbidden for this patient')
    return obj


def format_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'userId': p.user_id,
        'name': p.name,
        'age': p.age,
        'gender': p.gender,
        'email': p.email,
        'phone': p.phone,
        'address': p.address,
        'medicalConditions': list(p.medical_conditions or []),
        'allergies': list(p.allergies or []),
        'doctorId': p.doctor_id,
        'doctorName': p.doctor_name,
        'registrationDate': p.registration_date.isoformat() if p.registration_date else None,
        'emergencyContact': {
            'name': p.emergency_contact_name,
            'phone': p.emergency_contact_phone,
            'relationship': p.emergency_contact_relationship,
        },
        'bloodType': p.blood_type,
        'weight': p.weight,
        'height': p.height,
        'isActive': p.is_active,
    }


FIELD_MAP = {
    'name': 'name',
    'age': 'age',
    'gender': 'gender',
    'email': 'email',
    'phone': 'phone',
    'address': 'address',
    'medicalConditions': 'medical_conditions',
    'allergies': 'allergies',
    'bloodType': 'blood_type',
    'weight': 'weight',
    'height': 'height',
}


def apply_patient_fields(patient: Patient, data: dict) -> Patient:
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(patient, attr, data[key])
    contact = data.get('emergencyContact')
    if contact:
        for key in ('name', 'phone', 'relationship'):
            if key in contact:
                setattr(patient, f'emergency_contact_{key}', contact[key])
    if 'doctor' in data:
        doctor = data['doctor']
        patient.doctor = doctor
        patient.doctor_name = doctor.name if doctor else ''
    return patient


@transaction.atomic
def create_patient(data: dict) -> Patient:
    patient = apply_patient_fields(Patient(), data)
    patient.save()
    return patient


def delete_patient(patient: Patient, *, hard: bool = False) -> None:
    """Deactivate ``patient``; with ``hard`` remove its records, schedules and then itself.

    The deletes run one after the other without a wrapping transaction,
    so a failure part way leaves the earlier deletes in place.
    """
    if not hard:
        patient.is_active = False
        patient.save(update_fields=['is_active', 'updated_at'])
        return
    patient_id = patient.id
    for model in (ConsumptionRecord, MedicationSchedule):
        deleted, _ = model.objects.filter(patient_id=patient_id).delete()
        logger.info("Removed %s %s rows of patient %s", deleted, model.__name__, patient_id)
    patient.delete()
