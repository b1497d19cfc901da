"""
Django admin registrations for the reminder models.

Lets superusers inspect and correct records through ``/admin/``.
The soft-delete flag is exposed as a list filter everywhere it exists.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    ConsumptionRecord,
    Doctor,
    Medication,
    MedicationSchedule,
    Patient,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'is_active', 'is_staff', 'is_superuser')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'username', 'name')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'specialization', 'license_number', 'is_active')
    list_filter = ('is_active', 'specialization')
    search_fields = ('name', 'email', 'license_number')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'gender', 'age', 'doctor_name', 'is_active')
    list_filter = ('is_active', 'gender', 'blood_type')
    search_fields = ('name', 'email', 'phone')


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ('name', 'dosage', 'category', 'stock_quantity', 'expiry_date', 'is_active')
    list_filter = ('is_active', 'category')
    search_fields = ('name', 'manufacturer')


@admin.register(MedicationSchedule)
class MedicationScheduleAdmin(admin.ModelAdmin):
    list_display = ('medication_name', 'patient', 'start_date', 'end_date', 'prescribed_by_name', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('medication_name', 'patient__name', 'prescribed_by_name')


@admin.register(ConsumptionRecord)
class ConsumptionRecordAdmin(admin.ModelAdmin):
    list_display = ('medication_name', 'patient', 'date', 'scheduled_time', 'actual_time', 'status')
    list_filter = ('status', 'date')
    search_fields = ('medication_name', 'patient__name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('action', 'user__email')
