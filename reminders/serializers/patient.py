from rest_framework import serializers

from reminders.models import Doctor
from reminders.serializers.auth import clean_text


class EmergencyContactSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    relationship = serializers.CharField(required=False, allow_blank=True, max_length=64)


class PatientSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=['Laki-laki', 'Perempuan'], required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    address = serializers.CharField(required=False, allow_blank=True)
    medicalConditions = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    allergies = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    doctorId = serializers.PrimaryKeyRelatedField(
        queryset=Doctor.objects.active(), required=False, allow_null=True, source='doctor',
    )
    emergencyContact = EmergencyContactSerializer(required=False)
    bloodType = serializers.CharField(required=False, allow_blank=True, max_length=8)
    weight = serializers.FloatField(required=False, allow_null=True, min_value=0)
    height = serializers.FloatField(required=False, allow_null=True, min_value=0)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Nama tidak boleh kosong')
        return v
