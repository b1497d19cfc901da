"""
Medication schedule views.

Doctors prescribe schedules for their own patients and are recorded as
the prescriber unless another doctor is named.  Patients read the
schedules that belong to them.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.permissions import IsStaffRole
from reminders.serializers.common import DeleteSerializer, ListQuerySerializer, paginate
from reminders.serializers.schedule import ScheduleSerializer
from reminders.services import schedules as svc
from reminders.services.audit import audit_write
from reminders.services.patients import doctor_for_user, patients_visible_to
from reminders.services.search import search_schedules


def _check_patient_scope(user, patient):
    if user.role != 'admin' and not patients_visible_to(user).filter(id=patient.id).exists():
        raise PermissionDenied('forbidden for this patient')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def schedules(request):
    if request.method == 'POST':
        return _create_schedule(request)
    q = ListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    include_inactive = vd.get('includeInactive') and request.user.role in ('admin', 'doctor')
    qs = svc.schedules_visible_to(request.user, include_inactive=include_inactive)
    patient_id = request.query_params.get('patientId')
    if patient_id and patient_id.isdigit():
        qs = qs.filter(patient_id=int(patient_id))
    qs = search_schedules(qs, vd.get('q')).order_by('-start_date', 'id')
    rows, pagination = paginate(qs, vd.get('page'), vd.get('pageSize'))
    return Response({'ok': True, 'data': [svc.format_schedule(s) for s in rows], 'pagination': pagination})


def _create_schedule(request):
    if request.user.role not in ('admin', 'doctor'):
        raise PermissionDenied('only staff may prescribe schedules')
    s = ScheduleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    _check_patient_scope(request.user, data['patient'])
    if request.user.role == 'doctor' and not data.get('prescribedBy'):
        data['prescribedBy'] = doctor_for_user(request.user)
    schedule = svc.create_schedule(data)
    audit_write(request, 'schedule_create', schedule)
    return Response({'ok': True, 'data': svc.format_schedule(schedule)}, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def schedule_detail(request, pk: int):
    schedule = svc.get_schedule_for(request.user, pk)
    return Response({'ok': True, 'data': svc.format_schedule(schedule)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def schedule_update(request, pk: int):
    schedule = svc.get_schedule_for(request.user, pk)
    s = ScheduleSerializer(instance=schedule, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    if 'patient' in data:
        _check_patient_scope(request.user, data['patient'])
    svc.apply_schedule_fields(schedule, data).save()
    audit_write(request, 'schedule_update', schedule, {'fields': sorted(request.data.keys())})
    return Response({'ok': True, 'data': svc.format_schedule(schedule)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def schedule_delete(request, pk: int):
    """Deactivate a schedule; ``hard=true`` removes it with its consumption records."""
    schedule = svc.get_schedule_for(request.user, pk)
    s = DeleteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hard = s.validated_data['hard']
    audit_write(request, 'schedule_delete', schedule, {'hard': hard})
    svc.delete_schedule(schedule, hard=hard)
    return Response({'ok': True, 'id': pk, 'hard': hard})
