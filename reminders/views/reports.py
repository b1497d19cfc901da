from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.models import ConsumptionRecord, Patient
from reminders.permissions import IsAdminRole
from reminders.serializers.record import RecordQuerySerializer
from reminders.services.compliance import status_breakdown
from reminders.views.records import filter_records


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def consumption_report(request):
    """Status totals over the filtered records, overall and per patient."""
    q = RecordQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    rows = list(filter_records(ConsumptionRecord.objects.all(), vd).values('patient_id', 'status'))

    by_patient: dict[int, list[dict]] = {}
    for row in rows:
        by_patient.setdefault(row['patient_id'], []).append(row)
    names = dict(Patient.objects.filter(id__in=list(by_patient)).values_list('id', 'name'))
    patients = [
        {'patientId': pid, 'patientName': names.get(pid, ''), **status_breakdown(items)}
        for pid, items in by_patient.items()
    ]
    patients.sort(key=lambda p: (p['complianceRate'], p['patientName']))
    return Response({'ok': True, 'data': {'summary': status_breakdown(rows), 'patients': patients}})
