from django.urls import path
from .views import NotificationListView, NotificationDetailView, ToggleNotificationsView

app_name = 'notifications'

urlpatterns = [
    path('', NotificationListView.as_view(), name='notification-list'),
    path('toggle/', ToggleNotificationsView.as_view(), name='notification-toggle'),
    path('<int:pk>/', NotificationDetailView.as_view(), name='notification-detail'),
]
