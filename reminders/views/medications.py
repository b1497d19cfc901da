from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.models import Medication
from reminders.permissions import AdminWriteOrReadOnly, IsAdminRole
from reminders.serializers.common import ListQuerySerializer, paginate
from reminders.serializers.medication import MedicationSerializer
from reminders.services.audit import audit_write
from reminders.services.medications import apply_medication_fields, format_medication
from reminders.services.search import search_medications


def _get_medication(pk):
    medication = Medication.objects.filter(id=pk).first()
    if medication is None:
        raise NotFound('medication not found')
    return medication


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AdminWriteOrReadOnly])
def medications(request):
    if request.method == 'POST':
        s = MedicationSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        medication = apply_medication_fields(Medication(), s.validated_data)
        medication.save()
        audit_write(request, 'medication_create', medication)
        return Response({'ok': True, 'data': format_medication(medication)}, status=201)

    q = ListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = Medication.objects.all() if vd.get('includeInactive') and request.user.role == 'admin' else Medication.objects.active()
    qs = search_medications(qs, vd.get('q')).order_by('name', 'id')
    rows, pagination = paginate(qs, vd.get('page'), vd.get('pageSize'))
    return Response({'ok': True, 'data': [format_medication(m) for m in rows], 'pagination': pagination})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def medication_detail(request, pk: int):
    return Response({'ok': True, 'data': format_medication(_get_medication(pk))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def medication_update(request, pk: int):
    medication = _get_medication(pk)
    s = MedicationSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    apply_medication_fields(medication, s.validated_data).save()
    audit_write(request, 'medication_update', medication, {'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': format_medication(medication)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def medication_delete(request, pk: int):
    medication = _get_medication(pk)
    medication.is_active = False
    medication.save(update_fields=['is_active', 'updated_at'])
    audit_write(request, 'medication_delete', medication)
    return Response({'ok': True, 'id': pk})
