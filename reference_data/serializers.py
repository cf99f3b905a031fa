from rest_framework import serializers
from .models import LoadType, District


class LoadTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoadType
        fields = ['id', 'name', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Duplicate names are reported by the database as a conflict (409)
        extra_kwargs = {'name': {'validators': []}}

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Load type name is required')
        return value


class DistrictSerializer(serializers.ModelSerializer):
    class Meta:
        model = District
        fields = ['id', 'name', 'state', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Duplicate (name, state) pairs are reported by the database as a conflict (409)
        validators = []

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('District name is required')
        return value

    def validate_state(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('State is required')
        return value


class LoadTypeOptionSerializer(serializers.ModelSerializer):
    """Compact shape for order form pickers"""

    class Meta:
        model = LoadType
        fields = ['id', 'name']


class DistrictOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = District
        fields = ['id', 'name', 'state']
