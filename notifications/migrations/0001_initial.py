import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def notification_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('notification_type', models.CharField(choices=[('success', 'Success'), ('warning', 'Warning'), ('error', 'Error'), ('info', 'Info')], default='info', max_length=10)),
        ('title', models.CharField(max_length=200)),
        ('message', models.TextField()),
        ('category', models.CharField(choices=[('order', 'Order'), ('document', 'Document'), ('user', 'User'), ('system', 'System'), ('driver', 'Driver'), ('vehicle', 'Vehicle'), ('payment', 'Payment'), ('supplier_order', 'Supplier Order'), ('order_management', 'Order Management')], default='system', max_length=20)),
        ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='medium', max_length=10)),
        ('is_read', models.BooleanField(default=False)),
        ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
        ('read_at', models.DateTimeField(blank=True, null=True)),
        ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to='orders.order')),
        ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
        ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='suppliers.driver')),
        ('vehicle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='suppliers.vehicle')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
        ('suppliers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AdminNotification',
            fields=notification_fields(),
            options={
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [models.Index(fields=['is_read'], name='admin_notif_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='TransportRequestNotification',
            fields=notification_fields() + [
                ('buyer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [models.Index(fields=['is_read'], name='request_notif_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='VehicleLocationNotification',
            fields=notification_fields() + [
                ('vehicle_location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='suppliers.vehiclelocation')),
            ],
            options={
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [models.Index(fields=['is_read'], name='location_notif_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='SupplierNotification',
            fields=notification_fields() + [
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='supplier_notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [models.Index(fields=['recipient', 'is_read'], name='supplier_notif_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='BuyerNotification',
            fields=notification_fields() + [
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='buyer_notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [models.Index(fields=['recipient', 'is_read'], name='buyer_notif_read_idx')],
            },
        ),
    ]
