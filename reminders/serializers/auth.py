import bleach
from rest_framework import serializers

from reminders import errors


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Email tidak boleh kosong')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password tidak boleh kosong')
        return v


class SignUpSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(error_messages={'invalid': errors.readable_message(errors.INVALID_EMAIL)})
    password = serializers.CharField(trim_whitespace=False, write_only=True)
    confirmPassword = serializers.CharField(trim_whitespace=False, write_only=True)
    role = serializers.ChoiceField(choices=['admin', 'doctor', 'patient'], default='patient')
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=255)
    licenseNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Nama tidak boleh kosong')
        return v

    def validate_password(self, v):
        if len(v) < 6:
            raise serializers.ValidationError('Password minimal 6 karakter')
        return v

    def validate_phone(self, v):
        return clean_text(v)

    def validate(self, attrs):
        if attrs['password'] != attrs['confirmPassword']:
            raise serializers.ValidationError({'confirmPassword': 'Password tidak cocok'})
        if attrs.get('role') == 'doctor':
            missing = {}
            if not (attrs.get('specialization') or '').strip():
                missing['specialization'] = 'Spesialisasi wajib diisi untuk dokter'
            if not (attrs.get('licenseNumber') or '').strip():
                missing['licenseNumber'] = 'Nomor lisensi wajib diisi untuk dokter'
            if missing:
                raise serializers.ValidationError(missing)
        return attrs


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=255)
    licenseNumber = serializers.CharField(required=False, allow_blank=True, max_length=64)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Nama tidak boleh kosong')
        return v

    def validate_phone(self, v):
        return clean_text(v)


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
