from django.contrib import admin
from .models import LoadType, District


@admin.register(LoadType)
class LoadTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']


@admin.register(District)
class DistrictAdmin(admin.ModelAdmin):
    list_display = ['name', 'state', 'is_active', 'created_at']
    list_filter = ['is_active', 'state']
    search_fields = ['name', 'state']
