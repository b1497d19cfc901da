from rest_framework import serializers

from reminders.serializers.auth import clean_text


class DoctorSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    specialization = serializers.CharField(max_length=255)
    licenseNumber = serializers.CharField(max_length=64)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Nama tidak boleh kosong')
        return v
