from rest_framework import serializers

from reminders.models import Medication


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=64)
    frequency = serializers.CharField(required=False, allow_blank=True, max_length=64)
    instructions = serializers.CharField(required=False, allow_blank=True)
    sideEffects = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    category = serializers.ChoiceField(choices=[c for c, _ in Medication.CATEGORY_CHOICES], required=False)
    manufacturer = serializers.CharField(required=False, allow_blank=True, max_length=255)
    expiryDate = serializers.DateField(required=False, allow_null=True)
    stockQuantity = serializers.IntegerField(required=False, min_value=0)
