"""
URL mappings for the medication reminder API.

Trailing slashes are omitted; writes go to explicit ``/update`` and
``/delete`` sub-paths.
"""
from django.urls import include, path

from .auth_views import login_view, logout_view, me_update_view, me_view, refresh_view, signup_view
from .views import dashboard, doctors, health, medications, patients, records, reports, schedules

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/signup', signup_view, name='signup_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/refresh', refresh_view, name='refresh_view'),
    path('api/auth/me', me_view, name='me_view'),
    path('api/auth/me/update', me_update_view, name='me_update_view'),
    # Patients
    path('api/patients', patients.patients, name='patients'),
    path('api/patients/<int:pk>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<int:pk>/update', patients.patient_update, name='patient_update'),
    path('api/patients/<int:pk>/delete', patients.patient_delete, name='patient_delete'),
    path('api/patients/<int:pk>/compliance', patients.patient_compliance, name='patient_compliance'),
    # Doctors
    path('api/doctors', doctors.doctors, name='doctors'),
    path('api/doctors/<int:pk>', doctors.doctor_detail, name='doctor_detail'),
    path('api/doctors/<int:pk>/update', doctors.doctor_update, name='doctor_update'),
    path('api/doctors/<int:pk>/delete', doctors.doctor_delete, name='doctor_delete'),
    # Medications
    path('api/medications', medications.medications, name='medications'),
    path('api/medications/<int:pk>', medications.medication_detail, name='medication_detail'),
    path('api/medications/<int:pk>/update', medications.medication_update, name='medication_update'),
    path('api/medications/<int:pk>/delete', medications.medication_delete, name='medication_delete'),
    # Schedules
    path('api/schedules', schedules.schedules, name='schedules'),
    path('api/schedules/<int:pk>', schedules.schedule_detail, name='schedule_detail'),
    path('api/schedules/<int:pk>/update', schedules.schedule_update, name='schedule_update'),
    path('api/schedules/<int:pk>/delete', schedules.schedule_delete, name='schedule_delete'),
    # Consumption history
    path('api/records', records.records, name='records'),
    path('api/records/<int:pk>/update', records.record_update, name='record_update'),
    # Dashboard and patient pages
    path('api/dashboard', dashboard.dashboard, name='dashboard'),
    path('api/my/schedule', dashboard.my_schedule, name='my_schedule'),
    path('api/my/compliance', dashboard.my_compliance, name='my_compliance'),
    # Reports
    path('api/reports/consumption', reports.consumption_report, name='consumption_report'),
]
