from rest_framework import serializers

from reminders.models import Doctor, Medication, Patient

TIME_REGEX = r'^([01]\d|2[0-3]):[0-5]\d$'


class ScheduleSerializer(serializers.Serializer):
    patientId = serializers.PrimaryKeyRelatedField(queryset=Patient.objects.active(), source='patient')
    medicationId = serializers.PrimaryKeyRelatedField(
        queryset=Medication.objects.active(), source='medication', required=False, allow_null=True,
    )
    medicationName = serializers.CharField(required=False, allow_blank=True, max_length=255)
    dosage = serializers.CharField(required=False, allow_blank=True, max_length=64)
    times = serializers.ListField(
        child=serializers.RegexField(TIME_REGEX, error_messages={'invalid': 'Format waktu harus HH:MM'}),
        allow_empty=False,
    )
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    instructions = serializers.CharField(required=False, allow_blank=True)
    prescribedBy = serializers.PrimaryKeyRelatedField(
        queryset=Doctor.objects.active(), required=False, allow_null=True,
    )
    isActive = serializers.BooleanField(required=False)

    def validate(self, attrs):
        start = attrs.get('startDate') or getattr(self.instance, 'start_date', None)
        end = attrs.get('endDate') or getattr(self.instance, 'end_date', None)
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'Tanggal selesai harus setelah tanggal mulai'})
        if not self.partial and not attrs.get('medication') and not attrs.get('medicationName'):
            raise serializers.ValidationError({'medicationId': 'Obat wajib dipilih'})
        return attrs
