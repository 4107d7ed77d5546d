from django.urls import path
from .views import (
    TicketListCreateView,
    TicketDetailView,
    TicketValidateView,
    TicketByCodeView,
)

app_name = 'tickets'

urlpatterns = [
    path('', TicketListCreateView.as_view(), name='ticket-list'),
    path('validate/', TicketValidateView.as_view(), name='ticket-validate'),
    path('code/<str:raw_code>/', TicketByCodeView.as_view(), name='ticket-by-code'),
    path('<int:pk>/', TicketDetailView.as_view(), name='ticket-detail'),
]
