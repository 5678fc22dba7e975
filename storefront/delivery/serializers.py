from rest_framework import serializers
from .models import ServiceableArea
from .lookup import is_valid_pincode


class ServiceableAreaSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source='is_active', required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = ServiceableArea
        fields = ['id', 'pincode', 'city', 'state', 'isActive', 'createdAt', 'updatedAt']

    def validate_pincode(self, value):
        value = str(value).strip()
        if not is_valid_pincode(value):
            raise serializers.ValidationError('Pincode must be 6 digits.')
        return value
