"""
Patient management views.

Administrators manage every patient.  Doctors list and edit the
patients assigned to them and may register new ones, who are then
assigned to them.  A patient can only read their own record.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.permissions import IsAdminRole, IsStaffRole
from reminders.serializers.common import DeleteSerializer, ListQuerySerializer, paginate
from reminders.serializers.patient import PatientSerializer
from reminders.services import patients as svc
from reminders.services.audit import audit_write
from reminders.services.compliance import patient_compliance_rate, status_breakdown
from reminders.services.search import search_patients


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'POST':
        return _create_patient(request)
    q = ListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    role = getattr(request.user, 'role', '')
    if role == 'patient':
        raise PermissionDenied('patients cannot list patients')
    include_inactive = vd.get('includeInactive') and role == 'admin'
    qs = svc.patients_visible_to(request.user, include_inactive=include_inactive)
    qs = search_patients(qs, vd.get('q')).order_by('name', 'id')
    rows, pagination = paginate(qs, vd.get('page'), vd.get('pageSize'))
    return Response({'ok': True, 'data': [svc.format_patient(p) for p in rows], 'pagination': pagination})


def _create_patient(request):
    if getattr(request.user, 'role', '') not in ('admin', 'doctor'):
        raise PermissionDenied('only staff may register patients')
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if request.user.role == 'doctor':
        data['doctor'] = svc.doctor_for_user(request.user)
    patient = svc.create_patient(data)
    audit_write(request, 'patient_create', patient)
    return Response({'ok': True, 'data': svc.format_patient(patient)}, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = svc.get_patient_for(request.user, pk)
    return Response({'ok': True, 'data': svc.format_patient(patient)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def patient_update(request, pk: int):
    patient = svc.get_patient_for(request.user, pk)
    s = PatientSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if request.user.role == 'doctor':
        # doctors cannot hand their patients over to someone else
        data.pop('doctor', None)
    svc.apply_patient_fields(patient, data).save()
    audit_write(request, 'patient_update', patient, {'fields': sorted(request.data.keys())})
    return Response({'ok': True, 'data': svc.format_patient(patient)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def patient_delete(request, pk: int):
    """Deactivate a patient; ``hard=true`` removes the patient with its schedules and records."""
    patient = svc.get_patient_for(request.user, pk)
    s = DeleteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hard = s.validated_data['hard']
    audit_write(request, 'patient_delete', patient, {'hard': hard})
    svc.delete_patient(patient, hard=hard)
    return Response({'ok': True, 'id': pk, 'hard': hard})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_compliance(request, pk: int):
    patient = svc.get_patient_for(request.user, pk)
    breakdown = status_breakdown(patient.consumption_records.only('status'))
    breakdown['complianceRate'] = patient_compliance_rate(patient.id)
    return Response({'ok': True, 'data': {'patientId': patient.id, **breakdown}})
