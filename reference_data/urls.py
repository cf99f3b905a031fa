from django.urls import path
from . import views

urlpatterns = [
    path('load-types/', views.active_load_types, name='active-load-types'),
    path('districts/', views.active_districts, name='active-districts'),
]
