from django.db import models


class LoadType(models.Model):
    """Kind of goods carried (Rice, Cement, Steel...). Picked on every order."""
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, help_text='Inactive load types stay on existing orders but are hidden from pickers')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class District(models.Model):
    """District used for order pickup and delivery routes."""
    name = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, help_text='Inactive districts stay on existing orders but are hidden from pickers')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['state', 'name']
        constraints = [
            models.UniqueConstraint(fields=['name', 'state'], name='unique_district_per_state'),
        ]

    def __str__(self):
        return f"{self.name}, {self.state}"
