from django.urls import path
from .views import (
    AttractionListView,
    AttractionDetailView,
    ShowListView,
    ShowDetailView,
    ShowStatusView,
    ServiceListView,
    ServiceDetailView,
    TicketTypeListView,
    TicketAttractionView,
    TicketShowView,
    TicketServiceView,
)

app_name = 'catalog'

urlpatterns = [
    path('attractions/', AttractionListView.as_view(), name='attraction-list'),
    path('attractions/<int:pk>/', AttractionDetailView.as_view(), name='attraction-detail'),
    path('shows/', ShowListView.as_view(), name='show-list'),
    path('shows/<int:pk>/', ShowDetailView.as_view(), name='show-detail'),
    path('shows/<int:pk>/status/', ShowStatusView.as_view(), name='show-status'),
    path('services/', ServiceListView.as_view(), name='service-list'),
    path('services/<int:pk>/', ServiceDetailView.as_view(), name='service-detail'),
    path('ticket-types/', TicketTypeListView.as_view(), name='ticket-type-list'),
    path('ticket-attractions/', TicketAttractionView.as_view(), name='ticket-attractions'),
    path('ticket-shows/', TicketShowView.as_view(), name='ticket-shows'),
    path('ticket-services/', TicketServiceView.as_view(), name='ticket-services'),
]
