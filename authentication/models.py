from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ('buyer', 'Buyer'),
        ('supplier', 'Supplier'),
        ('admin', 'Admin'),
    ]

    phone_number = models.CharField(max_length=15, unique=True, blank=True, null=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='buyer')

    # Business details shown to admins when selecting suppliers and on buyer orders
    company_name = models.CharField(max_length=200, blank=True, help_text='Registered business name')
    gst_number = models.CharField(max_length=20, blank=True, help_text='GSTIN of the business')
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.get_display_name()} ({self.role})"

    def get_display_name(self):
        """Full name, then company, then username"""
        full_name = self.get_full_name()
        return full_name or self.company_name or self.username

    @property
    def is_buyer(self):
        return self.role == 'buyer'

    @property
    def is_supplier(self):
        return self.role == 'supplier'

    @property
    def is_admin_user(self):
        return self.role == 'admin'
