from django.urls import path
from . import views

urlpatterns = [
    # Merged feed for the caller's role
    path('feed/', views.notification_feed, name='notification-feed'),
    path('feed/read/', views.feed_mark_read, name='notification-feed-read'),
    path('feed/delete/', views.feed_delete, name='notification-feed-delete'),
    path('feed/mark-all-read/', views.feed_mark_all_read, name='notification-feed-mark-all-read'),
    path('feed/clear-all/', views.feed_clear_all, name='notification-feed-clear-all'),

    # Single source
    path('<slug:source_name>/', views.source_list, name='notification-source-list'),
    path('<slug:source_name>/count/', views.source_count, name='notification-source-count'),
    path('<slug:source_name>/mark-all-read/', views.source_mark_all_read, name='notification-source-mark-all-read'),
    path('<slug:source_name>/clear-all/', views.source_clear_all, name='notification-source-clear-all'),
    path('<slug:source_name>/<int:notification_id>/', views.source_delete, name='notification-source-delete'),
    path('<slug:source_name>/<int:notification_id>/read/', views.source_mark_read, name='notification-source-read'),
]
