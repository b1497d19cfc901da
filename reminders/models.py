"""
Database models for the medication reminder backend.

These models capture the records the front-end works with: user
accounts tagged with a role, patients, doctors, the medication
catalogue, medication schedules and the consumption history produced
by those schedules.  Patients, doctors, medications and schedules are
never removed by default; deleting one flips ``is_active`` instead so
the history that references it stays readable.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class ActiveQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class User(AbstractUser):
    """Custom user model with a role and optional doctor details.

    Roles mirror the front-end roles: 'admin', 'doctor' and 'patient'.
    The email address is the login name; ``username`` is kept equal to
    it so Django's own tooling keeps working.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_PATIENT = 'patient'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_PATIENT, 'Patient'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    specialization = models.CharField(max_length=255, blank=True)
    license_number = models.CharField(max_length=64, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def display_name(self) -> str:
        return self.name or self.get_full_name() or self.email or self.username

    @property
    def avatar(self) -> str:
        return self.display_name[:1].upper()

    def __str__(self) -> str:
        return f"{self.email or self.username} ({self.role})"


class Doctor(models.Model):
    """A doctor that patients can be assigned to.

    ``user`` links the record to a login account when the doctor signed
    up themselves; doctors created by an administrator may have none.
    """
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_profile'
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    specialization = models.CharField(max_length=255, blank=True)
    license_number = models.CharField(max_length=64, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.name} ({self.specialization})"


class Patient(models.Model):
    """A patient with demographics, conditions and vitals.

    The emergency contact is stored as three flat columns and exposed
    as a nested object by the API.
    """
    GENDER_CHOICES = [
        ('Laki-laki', 'Laki-laki'),
        ('Perempuan', 'Perempuan'),
    ]
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patient_profile'
    )
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=16, choices=GENDER_CHOICES, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.TextField(blank=True)
    medical_conditions = models.JSONField(default=list, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    doctor = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients'
    )
    doctor_name = models.CharField(max_length=255, blank=True)
    registration_date = models.DateField(auto_now_add=True)
    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_phone = models.CharField(max_length=32, blank=True)
    emergency_contact_relationship = models.CharField(max_length=64, blank=True)
    blood_type = models.CharField(max_length=8, blank=True)
    weight = models.FloatField(null=True, blank=True)
    height = models.FloatField(null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuerySet.as_manager()

    def __str__(self) -> str:
        return self.name


class Medication(models.Model):
    """An entry of the medication catalogue."""
    CATEGORY_CHOICES = [
        ('Antibiotik', 'Antibiotik'),
        ('Vitamin', 'Vitamin'),
        ('Analgesik', 'Analgesik'),
        ('Antihipertensi', 'Antihipertensi'),
        ('Antidiabetes', 'Antidiabetes'),
        ('Lainnya', 'Lainnya'),
    ]
    name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=64)
    frequency = models.CharField(max_length=64, blank=True)
    instructions = models.TextField(blank=True)
    side_effects = models.JSONField(default=list, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='Lainnya')
    manufacturer = models.CharField(max_length=255, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.name} {self.dosage}"


class MedicationSchedule(models.Model):
    """Times of day a patient takes a medication over a date range.

    ``medication_name``, ``dosage`` and ``prescribed_by_name`` are copied
    from the referenced rows when the schedule is written so the list
    views do not need to join.
    """
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='schedules')
    medication = models.ForeignKey(
        Medication, null=True, blank=True, on_delete=models.SET_NULL, related_name='schedules'
    )
    medication_name = models.CharField(max_length=255)
    dosage = models.CharField(max_length=64, blank=True)
    times = models.JSONField(default=list)
    start_date = models.DateField()
    end_date = models.DateField()
    instructions = models.TextField(blank=True)
    prescribed_by = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='prescriptions'
    )
    prescribed_by_name = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'is_active'], name='schedule_patient_active_idx'),
        ]

    def covers(self, day) -> bool:
        return self.start_date <= day <= self.end_date

    def __str__(self) -> str:
        return f"{self.medication_name} for {self.patient_id} at {', '.join(self.times)}"


class ConsumptionRecord(models.Model):
    """Whether a single scheduled dose was taken, taken late or missed."""
    STATUS_TAKEN = 'taken'
    STATUS_LATE = 'late'
    STATUS_MISSED = 'missed'
    STATUS_CHOICES = [
        (STATUS_TAKEN, 'Taken'),
        (STATUS_LATE, 'Late'),
        (STATUS_MISSED, 'Missed'),
    ]
    TAKEN_STATUSES = (STATUS_TAKEN, STATUS_LATE)

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='consumption_records')
    schedule = models.ForeignKey(
        MedicationSchedule, null=True, blank=True, on_delete=models.SET_NULL, related_name='records'
    )
    medication_name = models.CharField(max_length=255)
    date = models.DateField(db_index=True)
    scheduled_time = models.CharField(max_length=5)
    actual_time = models.CharField(max_length=5, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, db_index=True)
    notes = models.TextField(null=True, blank=True)
    reminder_sent = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-scheduled_time']
        indexes = [
            models.Index(fields=['patient', 'date'], name='record_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.medication_name} {self.date} {self.scheduled_time}: {self.status}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.object_type}#{self.object_id}"
