from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reminders.models import Doctor
from reminders.permissions import IsAdminRole, IsStaffRole
from reminders.serializers.common import ListQuerySerializer, paginate
from reminders.serializers.doctor import DoctorSerializer
from reminders.services.audit import audit_write
from reminders.services.doctors import apply_doctor_fields, deactivate_doctor, format_doctor, format_doctors
from reminders.services.search import search_doctors


def _get_doctor(pk):
    doctor = Doctor.objects.select_related('user').filter(id=pk).first()
    if doctor is None:
        raise NotFound('doctor not found')
    return doctor


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def doctors(request):
    if request.method == 'POST':
        if request.user.role != 'admin':
            raise PermissionDenied('only administrators may add doctors')
        s = DoctorSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = apply_doctor_fields(Doctor(), s.validated_data)
        doctor.save()
        audit_write(request, 'doctor_create', doctor)
        return Response({'ok': True, 'data': format_doctor(doctor)}, status=201)

    q = ListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = Doctor.objects.all() if vd.get('includeInactive') and request.user.role == 'admin' else Doctor.objects.active()
    qs = search_doctors(qs, vd.get('q')).order_by('name', 'id')
    rows, pagination = paginate(qs, vd.get('page'), vd.get('pageSize'))
    return Response({'ok': True, 'data': format_doctors(rows), 'pagination': pagination})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def doctor_detail(request, pk: int):
    return Response({'ok': True, 'data': format_doctor(_get_doctor(pk))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def doctor_update(request, pk: int):
    doctor = _get_doctor(pk)
    s = DoctorSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    apply_doctor_fields(doctor, s.validated_data).save()
    # keep the denormalized names on patients and prescriptions current
    if 'name' in s.validated_data:
        doctor.patients.update(doctor_name=doctor.name)
        doctor.prescriptions.update(prescribed_by_name=doctor.name)
    audit_write(request, 'doctor_update', doctor, {'fields': sorted(s.validated_data)})
    return Response({'ok': True, 'data': format_doctor(doctor)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def doctor_delete(request, pk: int):
    doctor = _get_doctor(pk)
    deactivate_doctor(doctor)
    audit_write(request, 'doctor_delete', doctor)
    return Response({'ok': True, 'id': pk})
