"""
URL configuration for transport_office project.
"""
from django.contrib import admin
from django.urls import path, include

from .health import health_check

urlpatterns = [
    # Health check endpoint (no authentication required)
    path('health/', health_check, name='health-check'),

    path('admin/', admin.site.urls),
    path('api/auth/', include('authentication.urls')),
    path('api/orders/', include('orders.urls')),
    path('api/supplier/', include('suppliers.urls')),
    path('api/admin/', include('admin_panel.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/reference/', include('reference_data.urls')),
]
