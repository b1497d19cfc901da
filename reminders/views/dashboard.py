"""
Dashboard and patient self-service endpoints.

``dashboard`` returns the statistics cards of the requesting user's
role.  The ``my_*`` endpoints serve the patient's own schedule page.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders import errors
from reminders.permissions import IsPatientRole
from reminders.services.compliance import patient_compliance_rate, status_breakdown
from reminders.services.dashboard import dashboard_stats
from reminders.services.patients import patient_for_user
from reminders.services.schedules import active_schedules_on, format_schedule, todays_doses, weekly_summary


def _own_patient(user):
    patient = patient_for_user(user)
    if patient is None:
        raise NotFound(errors.readable_message(errors.PROFILE_NOT_FOUND))
    return patient


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    return Response({
        'ok': True,
        'role': request.user.role,
        'date': timezone.localdate().isoformat(),
        'data': dashboard_stats(request.user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def my_schedule(request):
    patient = _own_patient(request.user)
    today = timezone.localdate()
    return Response({
        'ok': True,
        'date': today.isoformat(),
        'data': {
            'schedules': [format_schedule(s) for s in active_schedules_on(patient, today)],
            'today': todays_doses(patient, today),
            'week': weekly_summary(patient, today),
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def my_compliance(request):
    patient = _own_patient(request.user)
    breakdown = status_breakdown(patient.consumption_records.only('status'))
    breakdown['complianceRate'] = patient_compliance_rate(patient.id)
    return Response({'ok': True, 'data': {'patientId': patient.id, **breakdown}})
