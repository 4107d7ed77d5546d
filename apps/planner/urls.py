from django.urls import path
from .views import (
    PlannerListCreateView,
    PlannerDetailView,
    PlannerAddAttractionView,
    PlannerAddShowView,
    PlannerAddServiceView,
    ServiceBookingListCreateView,
    ServiceBookingDetailView,
)

app_name = 'planner'

urlpatterns = [
    path('planners/', PlannerListCreateView.as_view(), name='planner-list'),
    path('planners/<int:pk>/', PlannerDetailView.as_view(), name='planner-detail'),
    path('planners/<int:pk>/add-attraction/', PlannerAddAttractionView.as_view(), name='planner-add-attraction'),
    path('planners/<int:pk>/add-show/', PlannerAddShowView.as_view(), name='planner-add-show'),
    path('planners/<int:pk>/add-service/', PlannerAddServiceView.as_view(), name='planner-add-service'),
    path('service-bookings/', ServiceBookingListCreateView.as_view(), name='booking-list'),
    path('service-bookings/<int:pk>/', ServiceBookingDetailView.as_view(), name='booking-detail'),
]
