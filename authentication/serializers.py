from rest_framework import serializers
from orders.validators import validate_phone_number
from .models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            'id', 'username', 'name', 'email', 'first_name', 'last_name',
            'phone_number', 'role', 'company_name', 'gst_number', 'city', 'state',
            'is_active', 'created_at'
        ]
        read_only_fields = ['id', 'role', 'is_active', 'created_at']

    def validate_phone_number(self, value):
        if not value:
            return None
        validate_phone_number(value)
        return value

    def validate(self, data):
        if 'phone_number' in data and not data['phone_number']:
            if self.instance is not None and self.instance.role == 'supplier':
                raise serializers.ValidationError({'phone_number': 'Phone number is required for suppliers'})
        return data


class SignupSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(max_length=128, min_length=8, write_only=True)
    role = serializers.ChoiceField(choices=['buyer', 'supplier'], default='buyer')
    phone_number = serializers.CharField(max_length=15, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    company_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    gst_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_username(self, value):
        if CustomUser.objects.filter(username=value).exists():
            raise serializers.ValidationError('Username already exists')
        return value

    def validate_phone_number(self, value):
        if not value:
            return None
        validate_phone_number(value)
        if CustomUser.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError('Phone number already exists')
        return value

    def validate(self, data):
        # Suppliers are contacted over WhatsApp when orders are broadcast
        if data.get('role') == 'supplier' and not data.get('phone_number'):
            raise serializers.ValidationError({'phone_number': 'Phone number is required for suppliers'})
        return data
