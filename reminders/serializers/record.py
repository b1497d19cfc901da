from rest_framework import serializers

from reminders.models import ConsumptionRecord, MedicationSchedule
from reminders.serializers.common import ListQuerySerializer
from reminders.serializers.schedule import TIME_REGEX

STATUS_CHOICES = [c for c, _ in ConsumptionRecord.STATUS_CHOICES]


class RecordCreateSerializer(serializers.Serializer):
    scheduleId = serializers.PrimaryKeyRelatedField(queryset=MedicationSchedule.objects.active(), source='schedule')
    date = serializers.DateField()
    scheduledTime = serializers.RegexField(TIME_REGEX)
    actualTime = serializers.RegexField(TIME_REGEX, required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        schedule = attrs['schedule']
        if attrs['scheduledTime'] not in (schedule.times or []):
            raise serializers.ValidationError({'scheduledTime': 'Waktu tidak ada di jadwal'})
        if not schedule.covers(attrs['date']):
            raise serializers.ValidationError({'date': 'Tanggal di luar periode jadwal'})
        return attrs


class RecordUpdateSerializer(serializers.Serializer):
    actualTime = serializers.RegexField(TIME_REGEX, required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RecordQuerySerializer(ListQuerySerializer):
    patientId = serializers.IntegerField(required=False, min_value=1)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)
