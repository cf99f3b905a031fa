from django.urls import path
from . import views

urlpatterns = [
    path('', views.my_orders, name='my-orders'),
    path('accepted/', views.accepted_requests, name='accepted-requests'),
    path('<int:order_id>/', views.order_detail, name='order-detail'),
    path('<int:order_id>/submit/', views.submit_order, name='submit-order'),
    path('<int:order_id>/cancel/', views.cancel_order, name='cancel-order'),
]
