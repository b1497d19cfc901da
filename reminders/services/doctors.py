from typing import Optional

from reminders.models import Doctor, Patient


def format_doctor(d: Doctor, *, patient_ids: Optional[list[int]] = None) -> dict:
    if patient_ids is None:
        patient_ids = list(d.patients.filter(is_active=True).values_list('id', flat=True))
    return {
        'id': d.id,
        'userId': d.user_id,
        'name': d.name,
        'email': d.email,
        'specialization': d.specialization,
        'licenseNumber': d.license_number,
        'phone': d.phone,
        'patientIds': patient_ids,
        'patientCount': len(patient_ids),
        'isActive': d.is_active,
    }


def format_doctors(doctors) -> list[dict]:
    """Format many doctors with one query for all their patient ids."""
    doctors = list(doctors)
    by_doctor: dict[int, list[int]] = {d.id: [] for d in doctors}
    rows = Patient.objects.filter(doctor_id__in=list(by_doctor), is_active=True).values_list('doctor_id', 'id')
    for doctor_id, patient_id in rows.order_by('id'):
        by_doctor[doctor_id].append(patient_id)
    return [format_doctor(d, patient_ids=by_doctor[d.id]) for d in doctors]


def apply_doctor_fields(doctor: Doctor, data: dict) -> Doctor:
    for key, attr in (('name', 'name'), ('email', 'email'), ('specialization', 'specialization'),
                      ('licenseNumber', 'license_number'), ('phone', 'phone')):
        if key in data:
            setattr(doctor, attr, data[key])
    return doctor


def deactivate_doctor(doctor: Doctor) -> None:
    doctor.is_active = False
    doctor.save(update_fields=['is_active', 'updated_at'])
    if doctor.user_id:
        doctor.user.is_active = False
        doctor.user.save(update_fields=['is_active', 'updated_at'])
