from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ['username', 'company_name', 'phone_number', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['username', 'phone_number', 'email', 'company_name']

    fieldsets = UserAdmin.fieldsets + (
        ('Business', {'fields': ('phone_number', 'role', 'company_name', 'gst_number', 'city', 'state')}),
    )

    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Business', {'fields': ('phone_number', 'role', 'company_name')}),
    )
