from django.urls import path
from orders import views as order_views
from . import views

urlpatterns = [
    # Broadcast orders
    path('submissions/', order_views.my_submissions, name='supplier-submissions'),
    path('submissions/<int:submission_id>/', order_views.submission_detail, name='supplier-submission-detail'),
    path('submissions/<int:submission_id>/confirm/', order_views.confirm_submission, name='supplier-confirm-submission'),
    path('submissions/<int:submission_id>/decline/', order_views.decline_submission, name='supplier-decline-submission'),
    path('orders/<int:order_id>/progress/', order_views.update_progress, name='supplier-order-progress'),

    # Fleet
    path('drivers/', views.drivers, name='supplier-drivers'),
    path('drivers/<int:driver_id>/', views.driver_detail, name='supplier-driver-detail'),
    path('vehicles/', views.vehicles, name='supplier-vehicles'),
    path('vehicles/<int:vehicle_id>/', views.vehicle_detail, name='supplier-vehicle-detail'),
    path('vehicle-locations/', views.vehicle_locations, name='supplier-vehicle-locations'),
    path('vehicle-locations/<int:location_id>/', views.vehicle_location_detail, name='supplier-vehicle-location-detail'),

    # Verification
    path('documents/', views.documents, name='supplier-documents'),
]
