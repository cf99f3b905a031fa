import django.db.models.deletion
import orders.validators
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('reference_data', '0001_initial'),
        ('suppliers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(editable=False, max_length=20, unique=True)),
                ('order_type', models.CharField(choices=[('buyer_request', 'Buyer Request'), ('manual_order', 'Manual Order')], default='buyer_request', max_length=20)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('pending', 'Pending'), ('submitted', 'Sent to Suppliers'), ('assigned', 'Assigned'), ('confirmed', 'Confirmed'), ('picked_up', 'Picked Up'), ('in_transit', 'In Transit'), ('delivered', 'Delivered'), ('completed', 'Completed'), ('rejected', 'Rejected'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('estimated_tons', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('number_of_goods', models.PositiveIntegerField(blank=True, null=True)),
                ('from_state', models.CharField(max_length=100)),
                ('from_place', models.CharField(max_length=200)),
                ('from_taluk', models.CharField(blank=True, max_length=100)),
                ('to_state', models.CharField(max_length=100)),
                ('to_place', models.CharField(max_length=200)),
                ('to_taluk', models.CharField(blank=True, max_length=100)),
                ('delivery_place', models.CharField(blank=True, help_text='Exact delivery address if different from the destination place', max_length=255)),
                ('required_date', models.DateField(blank=True, null=True)),
                ('special_instructions', models.TextField(blank=True)),
                ('rate', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('distance_km', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('admin_notes', models.TextField(blank=True, help_text='Internal notes for admins')),
                ('driver_mobile', models.CharField(blank=True, max_length=15)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_at', models.DateTimeField(blank=True, null=True)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_transport_orders', to=settings.AUTH_USER_MODEL)),
                ('buyer', models.ForeignKey(blank=True, help_text='Empty for manual orders entered by the office', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='transport_orders', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_transport_orders', to=settings.AUTH_USER_MODEL)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='suppliers.driver')),
                ('from_district', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders_from', to='reference_data.district')),
                ('load_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='reference_data.loadtype')),
                ('to_district', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders_to', to='reference_data.district')),
                ('vehicle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='suppliers.vehicle')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='order_status_idx'),
                    models.Index(fields=['order_type'], name='order_type_idx'),
                    models.Index(fields=['created_at'], name='order_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('estimated_tons__isnull', False), ('number_of_goods__isnull', False), _connector='OR'), name='order_has_load_quantity'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('submitted', 'Submitted'), ('viewed', 'Viewed'), ('responded', 'Responded'), ('confirmed', 'Confirmed'), ('rejected', 'Rejected'), ('ignored', 'Ignored'), ('accepted', 'Accepted'), ('accepted_by_other', 'Accepted by Another Supplier')], default='submitted', max_length=20)),
                ('notification_sent', models.BooleanField(default=False)),
                ('whatsapp_sent', models.BooleanField(default=False, help_text='A wa.me link was produced for this supplier')),
                ('driver_mobile', models.CharField(blank=True, max_length=15, validators=[orders.validators.validate_phone_number])),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('sent_to_buyer_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submissions', to='suppliers.driver')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='orders.order')),
                ('submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_submissions', to=settings.AUTH_USER_MODEL)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_submissions', to=settings.AUTH_USER_MODEL)),
                ('vehicle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submissions', to='suppliers.vehicle')),
            ],
            options={
                'ordering': ['-submitted_at'],
                'indexes': [models.Index(fields=['status'], name='submission_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('order', 'supplier'), name='unique_submission_per_supplier')],
            },
        ),
        migrations.CreateModel(
            name='OrderStatusHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_status', models.CharField(blank=True, max_length=20)),
                ('new_status', models.CharField(max_length=20)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('reason', models.TextField(blank=True)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transport_status_changes', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='orders.order')),
            ],
            options={
                'verbose_name_plural': 'Order status histories',
                'ordering': ['-changed_at'],
            },
        ),
        migrations.CreateModel(
            name='AcceptedRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sent_at', models.DateTimeField(auto_now_add=True)),
                ('buyer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accepted_requests', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accepted_requests', to='orders.order')),
                ('sent_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='forwarded_requests', to=settings.AUTH_USER_MODEL)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accepted_requests', to='orders.ordersubmission')),
            ],
            options={
                'ordering': ['-sent_at'],
                'constraints': [models.UniqueConstraint(fields=('submission', 'buyer'), name='unique_accepted_request_per_buyer')],
            },
        ),
    ]
