"""
Consumption history views.

Records are read through the patients a user can see.  The patient who
owns the schedule, the patient's doctor and administrators may record
and correct doses.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.models import ConsumptionRecord
from reminders.serializers.common import paginate
from reminders.serializers.record import RecordCreateSerializer, RecordQuerySerializer, RecordUpdateSerializer
from reminders.services.audit import audit_write
from reminders.services.compliance import status_breakdown
from reminders.services.patients import patients_visible_to
from reminders.services.records import create_record, format_record, update_record
from reminders.services.schedules import get_schedule_for
from reminders.services.search import search_records


def records_visible_to(user):
    qs = ConsumptionRecord.objects.select_related('patient')
    if getattr(user, 'role', '') == 'admin':
        return qs
    return qs.filter(patient__in=patients_visible_to(user))


def filter_records(qs, vd):
    if vd.get('patientId'):
        qs = qs.filter(patient_id=vd['patientId'])
    if vd.get('status'):
        qs = qs.filter(status=vd['status'])
    if vd.get('dateFrom'):
        qs = qs.filter(date__gte=vd['dateFrom'])
    if vd.get('dateTo'):
        qs = qs.filter(date__lte=vd['dateTo'])
    return search_records(qs, vd.get('q'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def records(request):
    if request.method == 'POST':
        s = RecordCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        schedule = get_schedule_for(request.user, v['schedule'].id)
        record = create_record(
            schedule,
            date=v['date'],
            scheduled_time=v['scheduledTime'],
            actual_time=v.get('actualTime'),
            status=v.get('status'),
            notes=v.get('notes'),
        )
        audit_write(request, 'record_create', record, {'status': record.status})
        return Response({'ok': True, 'data': format_record(record)}, status=201)

    q = RecordQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = filter_records(records_visible_to(request.user), vd)
    summary = status_breakdown(qs.values('status'))
    rows, pagination = paginate(qs, vd.get('page'), vd.get('pageSize'))
    return Response({
        'ok': True,
        'data': [format_record(r) for r in rows],
        'summary': summary,
        'pagination': pagination,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def record_update(request, pk: int):
    record = records_visible_to(request.user).filter(id=pk).first()
    if record is None:
        raise NotFound('record not found')
    s = RecordUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    update_record(record, s.validated_data)
    audit_write(request, 'record_update', record, {'status': record.status})
    return Response({'ok': True, 'data': format_record(record)})
