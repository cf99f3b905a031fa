from rest_framework import serializers
from .models import BaseNotification


class FeedActionSerializer(serializers.Serializer):
    """Body of feed mark-read / delete: ids are only unique per category's store"""
    id = serializers.IntegerField(min_value=1)
    category = serializers.ChoiceField(choices=[choice for choice, _ in BaseNotification.CATEGORY_CHOICES])
