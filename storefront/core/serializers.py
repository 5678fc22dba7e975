from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, AuditLog


class UserSerializer(serializers.ModelSerializer):
    phoneNumber = serializers.CharField(source='phone_number', required=False, allow_null=True, allow_blank=True)
    isAdmin = serializers.BooleanField(source='is_admin', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'phoneNumber', 'role', 'isAdmin', 'is_active', 'createdAt']
        read_only_fields = ['role', 'is_active']


class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    phoneNumber = serializers.CharField(source='phone_number', required=False, allow_null=True, allow_blank=True)

    class Meta:
        model = User
        fields = ['name', 'email', 'phoneNumber', 'password']
        extra_kwargs = {
            'name': {'required': True, 'allow_blank': False},
            'email': {'validators': []},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('Email already registered')
        return value

    def validate_phoneNumber(self, value):
        if value and User.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError('Phone number already registered')
        return value or None

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(
            username=validated_data['email'][:150],
            role='customer',
            is_active=True,
            **validated_data
        )
        user.set_password(password)
        user.save()
        return user


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    modelName = serializers.CharField(source='model_name')
    objectId = serializers.CharField(source='object_id')
    objectName = serializers.CharField(source='object_name')
    objectReference = serializers.CharField(source='object_reference')
    ipAddress = serializers.CharField(source='ip_address')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'modelName', 'objectId', 'objectName',
                  'objectReference', 'changes', 'ipAddress', 'createdAt']
