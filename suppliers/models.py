from django.db import models
from authentication.models import CustomUser
from orders.validators import validate_phone_number
from reference_data.models import District


class Driver(models.Model):
    supplier = models.ForeignKey(
        CustomUser,
        related_name='drivers',
        on_delete=models.CASCADE,
        limit_choices_to={'role': 'supplier'}
    )
    driver_name = models.CharField(max_length=150)
    mobile = models.CharField(max_length=15, validators=[validate_phone_number])
    license_number = models.CharField(max_length=50, blank=True)
    license_document_url = models.URLField(blank=True, help_text='Link to the already uploaded licence scan')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.driver_name} ({self.mobile})"


class Vehicle(models.Model):
    BODY_TYPE_CHOICES = [
        ('open', 'Open Body'),
        ('closed', 'Closed Container'),
        ('trailer', 'Trailer'),
        ('tanker', 'Tanker'),
        ('tipper', 'Tipper'),
        ('refrigerated', 'Refrigerated'),
        ('other', 'Other'),
    ]

    supplier = models.ForeignKey(
        CustomUser,
        related_name='vehicles',
        on_delete=models.CASCADE,
        limit_choices_to={'role': 'supplier'}
    )
    vehicle_number = models.CharField(max_length=20, unique=True)
    body_type = models.CharField(max_length=20, choices=BODY_TYPE_CHOICES, default='open')
    capacity_tons = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    number_of_wheels = models.PositiveSmallIntegerField(null=True, blank=True)
    document_url = models.URLField(blank=True, help_text='Link to the already uploaded RC scan')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.vehicle_number

    def save(self, *args, **kwargs):
        self.vehicle_number = self.vehicle_number.replace(' ', '').upper()
        super().save(*args, **kwargs)


class VehicleLocation(models.Model):
    """A supplier announcing that a vehicle is free at a place and looking for a load."""
    STATUS_CHOICES = [
        ('available', 'Available'),
        ('assigned', 'Assigned'),
        ('closed', 'Closed'),
    ]

    supplier = models.ForeignKey(CustomUser, related_name='vehicle_locations', on_delete=models.CASCADE)
    vehicle = models.ForeignKey(Vehicle, related_name='locations', on_delete=models.CASCADE)
    driver = models.ForeignKey(Driver, related_name='locations', on_delete=models.SET_NULL, null=True, blank=True)
    state = models.CharField(max_length=100)
    district = models.ForeignKey(District, related_name='vehicle_locations', on_delete=models.PROTECT)
    place = models.CharField(max_length=200)
    taluk = models.CharField(max_length=100, blank=True)
    recommended_location = models.CharField(max_length=200, blank=True, help_text='Where the supplier would like the next load to go')
    available_from = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.vehicle} at {self.place}, {self.district}"


class SupplierDocument(models.Model):
    DOCUMENT_TYPE_CHOICES = [
        ('gst_certificate', 'GST Certificate'),
        ('pan_card', 'PAN Card'),
        ('vehicle_rc', 'Vehicle RC'),
        ('insurance', 'Insurance'),
        ('permit', 'Permit'),
        ('driver_license', 'Driver Licence'),
        ('other', 'Other'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending Review'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    supplier = models.ForeignKey(CustomUser, related_name='documents', on_delete=models.CASCADE)
    document_type = models.CharField(max_length=30, choices=DOCUMENT_TYPE_CHOICES)
    document_url = models.URLField(help_text='Link to the already uploaded file')
    vehicle = models.ForeignKey(Vehicle, related_name='documents', on_delete=models.CASCADE, null=True, blank=True)
    driver = models.ForeignKey(Driver, related_name='documents', on_delete=models.CASCADE, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    review_notes = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        CustomUser,
        related_name='reviewed_documents',
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at']
        indexes = [
            models.Index(fields=['status'], name='supplier_doc_status_idx'),
        ]

    def __str__(self):
        return f"{self.get_document_type_display()} - {self.supplier.username} ({self.status})"
