from decimal import Decimal
from django.db import IntegrityError, models, transaction
from authentication.models import CustomUser
from reference_data.models import LoadType, District
from suppliers.models import Driver, Vehicle
from .validators import validate_load_quantity, validate_phone_number


ORDER_NUMBER_PREFIXES = {
    'buyer_request': 'ORD',
    'manual_order': 'MO',
}


def generate_order_number(prefix):
    """Next number for a prefix: ORD-7 follows ORD-6, MO-3 follows MO-2"""
    issued = Order.objects.filter(
        order_number__startswith=f'{prefix}-'
    ).values_list('order_number', flat=True)

    highest = 0
    for number in issued:
        suffix = number.split('-', 1)[1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))

    return f"{prefix}-{highest + 1}"


class Order(models.Model):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('pending', 'Pending'),
        ('submitted', 'Sent to Suppliers'),
        ('assigned', 'Assigned'),
        ('confirmed', 'Confirmed'),
        ('picked_up', 'Picked Up'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('completed', 'Completed'),
        ('rejected', 'Rejected'),
        ('cancelled', 'Cancelled'),
    ]

    ORDER_TYPE_CHOICES = [
        ('buyer_request', 'Buyer Request'),
        ('manual_order', 'Manual Order'),
    ]

    # Manual orders are handled by the office, so "sent" reads better than "assigned"
    STATUS_LABEL_OVERRIDES = {
        'manual_order': {
            'submitted': 'Sent',
            'assigned': 'Sent',
        },
    }

    TERMINAL_STATUSES = ['delivered', 'completed', 'rejected', 'cancelled']

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES, default='buyer_request')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    buyer = models.ForeignKey(
        CustomUser,
        related_name='transport_orders',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        help_text='Empty for manual orders entered by the office'
    )
    created_by = models.ForeignKey(
        CustomUser,
        related_name='created_transport_orders',
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )

    # Load
    load_type = models.ForeignKey(LoadType, related_name='orders', on_delete=models.PROTECT)
    estimated_tons = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    number_of_goods = models.PositiveIntegerField(null=True, blank=True)

    # Route
    from_state = models.CharField(max_length=100)
    from_district = models.ForeignKey(District, related_name='orders_from', on_delete=models.PROTECT)
    from_place = models.CharField(max_length=200)
    from_taluk = models.CharField(max_length=100, blank=True)
    to_state = models.CharField(max_length=100)
    to_district = models.ForeignKey(District, related_name='orders_to', on_delete=models.PROTECT)
    to_place = models.CharField(max_length=200)
    to_taluk = models.CharField(max_length=100, blank=True)
    delivery_place = models.CharField(max_length=255, blank=True, help_text='Exact delivery address if different from the destination place')

    required_date = models.DateField(null=True, blank=True)
    special_instructions = models.TextField(blank=True)
    rate = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    distance_km = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    # Direct assignment. Broadcast orders go through OrderSubmission instead.
    assigned_supplier = models.ForeignKey(
        CustomUser,
        related_name='assigned_transport_orders',
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    admin_notes = models.TextField(blank=True, help_text='Internal notes for admins')

    # Execution details copied from the confirming supplier
    driver = models.ForeignKey(Driver, related_name='orders', on_delete=models.SET_NULL, null=True, blank=True)
    vehicle = models.ForeignKey(Vehicle, related_name='orders', on_delete=models.SET_NULL, null=True, blank=True)
    driver_mobile = models.CharField(max_length=15, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='order_status_idx'),
            models.Index(fields=['order_type'], name='order_type_idx'),
            models.Index(fields=['created_at'], name='order_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(estimated_tons__isnull=False) | models.Q(number_of_goods__isnull=False),
                name='order_has_load_quantity',
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    def clean(self):
        validate_load_quantity(self.estimated_tons, self.number_of_goods)

    def save(self, *args, **kwargs):
        if self.order_number:
            return super().save(*args, **kwargs)

        # Two orders created at the same moment can compute the same number;
        # the unique constraint catches it and the next attempt recomputes.
        prefix = ORDER_NUMBER_PREFIXES[self.order_type]
        for attempt in range(3):
            self.order_number = generate_order_number(prefix)
            try:
                with transaction.atomic():
                    return super().save(*args, **kwargs)
            except IntegrityError:
                self.order_number = ''
                if attempt == 2:
                    raise

    @property
    def is_manual(self):
        return self.order_type == 'manual_order'

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def get_status_label(self):
        overrides = self.STATUS_LABEL_OVERRIDES.get(self.order_type, {})
        return overrides.get(self.status, self.get_status_display())

    def get_quantity_display(self):
        """'12 tons / 40 units', '12 tons' or '40 units'"""
        parts = []
        if self.estimated_tons is not None:
            parts.append(f"{Decimal(str(self.estimated_tons)).normalize():f} tons")
        if self.number_of_goods is not None:
            parts.append(f"{self.number_of_goods} units")
        return ' / '.join(parts)

    def get_route_display(self):
        return f"{self.from_place} → {self.to_place}"


class OrderSubmission(models.Model):
    """One supplier's copy of a broadcast order. At most one per (order, supplier)."""
    STATUS_CHOICES = [
        ('submitted', 'Submitted'),
        ('viewed', 'Viewed'),
        ('responded', 'Responded'),
        ('confirmed', 'Confirmed'),
        ('rejected', 'Rejected'),
        ('ignored', 'Ignored'),
        ('accepted', 'Accepted'),
        ('accepted_by_other', 'Accepted by Another Supplier'),
    ]

    OPEN_STATUSES = ['submitted', 'viewed', 'responded']
    CONFIRMED_STATUSES = ['confirmed', 'accepted']

    order = models.ForeignKey(Order, related_name='submissions', on_delete=models.CASCADE)
    supplier = models.ForeignKey(CustomUser, related_name='order_submissions', on_delete=models.CASCADE)
    submitted_by = models.ForeignKey(
        CustomUser,
        related_name='sent_submissions',
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='submitted')
    notification_sent = models.BooleanField(default=False)
    whatsapp_sent = models.BooleanField(default=False, help_text='A wa.me link was produced for this supplier')

    driver = models.ForeignKey(Driver, related_name='submissions', on_delete=models.SET_NULL, null=True, blank=True)
    vehicle = models.ForeignKey(Vehicle, related_name='submissions', on_delete=models.SET_NULL, null=True, blank=True)
    driver_mobile = models.CharField(max_length=15, blank=True, validators=[validate_phone_number])

    submitted_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    sent_to_buyer_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-submitted_at']
        constraints = [
            models.UniqueConstraint(fields=['order', 'supplier'], name='unique_submission_per_supplier'),
        ]
        indexes = [
            models.Index(fields=['status'], name='submission_status_idx'),
        ]

    def __str__(self):
        return f"{self.order.order_number} -> {self.supplier.username} ({self.status})"

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES


class OrderStatusHistory(models.Model):
    """Track order status changes for audit trail"""
    order = models.ForeignKey(Order, related_name='status_history', on_delete=models.CASCADE)
    old_status = models.CharField(max_length=20, blank=True)
    new_status = models.CharField(max_length=20)
    changed_by = models.ForeignKey(
        CustomUser,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transport_status_changes'
    )
    changed_at = models.DateTimeField(auto_now_add=True)
    reason = models.TextField(blank=True)

    class Meta:
        ordering = ['-changed_at']
        verbose_name_plural = 'Order status histories'

    def __str__(self):
        return f"{self.order.order_number}: {self.old_status or '-'} -> {self.new_status}"


class AcceptedRequest(models.Model):
    """A confirmed submission forwarded by an admin to a buyer."""
    submission = models.ForeignKey(OrderSubmission, related_name='accepted_requests', on_delete=models.CASCADE)
    order = models.ForeignKey(Order, related_name='accepted_requests', on_delete=models.CASCADE)
    buyer = models.ForeignKey(CustomUser, related_name='accepted_requests', on_delete=models.CASCADE)
    sent_by = models.ForeignKey(
        CustomUser,
        related_name='forwarded_requests',
        on_delete=models.SET_NULL,
        null=True,
        blank=True
    )
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-sent_at']
        constraints = [
            models.UniqueConstraint(fields=['submission', 'buyer'], name='unique_accepted_request_per_buyer'),
        ]

    def __str__(self):
        return f"{self.order.order_number} sent to {self.buyer.username}"
