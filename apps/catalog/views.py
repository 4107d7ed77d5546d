from django.utils.decorators import method_decorator
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from apps.accounts.permissions import IsParkStaffOrReadOnly

from .models import Attraction, Show, Service, TicketType
from .serializers import (
    AttractionSerializer,
    ShowSerializer,
    ShowStatusSerializer,
    ServiceSerializer,
    TicketTypeSerializer,
    TicketTypeLinkSerializer,
)
from .services import CatalogService


class CatalogListView(APIView):
    """
    Public list, staff create. Subclasses set ``model`` and ``serializer_class``.
    """
    permission_classes = [IsParkStaffOrReadOnly]
    model = None
    serializer_class = None

    def get(self, request):
        serializer = self.serializer_class(self.model.objects.all(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = self.serializer_class(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class CatalogDetailView(APIView):
    """
    Public read, staff update and delete
    """
    permission_classes = [IsParkStaffOrReadOnly]
    model = None
    serializer_class = None

    def get(self, request, pk):
        item = CatalogService.get_item(self.model, pk)
        return Response(self.serializer_class(item).data, status=status.HTTP_200_OK)

    def put(self, request, pk):
        item = CatalogService.get_item(self.model, pk)
        serializer = self.serializer_class(item, data=request.data, partial=True)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)

    def delete(self, request, pk):
        item = CatalogService.get_item(self.model, pk)
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List attractions", tags=['Attractions']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Create an attraction (staff)", request_body=AttractionSerializer,
    security=[{'Bearer': []}], tags=['Attractions']))
class AttractionListView(CatalogListView):
    model = Attraction
    serializer_class = AttractionSerializer


@method_decorator(name='put', decorator=swagger_auto_schema(
    operation_description="Update an attraction (staff)", request_body=AttractionSerializer,
    security=[{'Bearer': []}], tags=['Attractions']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Delete an attraction (staff)", security=[{'Bearer': []}], tags=['Attractions']))
@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="Attraction detail", tags=['Attractions']))
class AttractionDetailView(CatalogDetailView):
    model = Attraction
    serializer_class = AttractionSerializer


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List shows. Status is derived from the show's time window unless cancelled or delayed.",
    tags=['Shows']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Create a show (staff)", request_body=ShowSerializer,
    security=[{'Bearer': []}], tags=['Shows']))
class ShowListView(CatalogListView):
    model = Show
    serializer_class = ShowSerializer


@method_decorator(name='put', decorator=swagger_auto_schema(
    operation_description="Update a show (staff)", request_body=ShowSerializer,
    security=[{'Bearer': []}], tags=['Shows']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Delete a show (staff)", security=[{'Bearer': []}], tags=['Shows']))
@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="Show detail", tags=['Shows']))
class ShowDetailView(CatalogDetailView):
    model = Show
    serializer_class = ShowSerializer


class ShowStatusView(APIView):
    """
    API endpoint for staff to cancel or delay a show
    """
    permission_classes = [IsParkStaffOrReadOnly]

    @swagger_auto_schema(
        operation_description="Mark a show CANCELLED or DELAYED",
        request_body=ShowStatusSerializer,
        responses={
            200: openapi.Response(description="Show updated", schema=ShowSerializer),
            400: openapi.Response(description="Status not allowed"),
            403: openapi.Response(description="Staff only"),
            404: openapi.Response(description="Show not found"),
        },
        security=[{'Bearer': []}],
        tags=['Shows']
    )
    def put(self, request, pk):
        serializer = ShowStatusSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        show = CatalogService.set_show_status(pk, serializer.validated_data['status'])
        return Response(ShowSerializer(show).data, status=status.HTTP_200_OK)


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List services", tags=['Services']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Create a service (staff)", request_body=ServiceSerializer,
    security=[{'Bearer': []}], tags=['Services']))
class ServiceListView(CatalogListView):
    model = Service
    serializer_class = ServiceSerializer


@method_decorator(name='put', decorator=swagger_auto_schema(
    operation_description="Update a service (staff)", request_body=ServiceSerializer,
    security=[{'Bearer': []}], tags=['Services']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Delete a service (staff)", security=[{'Bearer': []}], tags=['Services']))
@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="Service detail", tags=['Services']))
class ServiceDetailView(CatalogDetailView):
    model = Service
    serializer_class = ServiceSerializer


class TicketTypeListView(APIView):
    """
    API endpoint listing ticket types with their whitelists
    """
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="List ticket types, with the attractions, shows and services each one includes",
        responses={200: TicketTypeSerializer(many=True)},
        tags=['Ticket Types']
    )
    def get(self, request):
        ticket_types = TicketType.objects.prefetch_related('attractions', 'shows', 'services')
        serializer = TicketTypeSerializer(ticket_types, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


class TicketTypeLinkView(APIView):
    """
    Whitelist associations between ticket types and one kind of catalog item
    """
    permission_classes = [IsParkStaffOrReadOnly]
    kind = None

    def get(self, request):
        ticket_type_id = request.query_params.get('ticket_type_id')

        if ticket_type_id is not None and not ticket_type_id.isdigit():
            return Response(
                {'error': 'ticket_type_id must be an integer'},
                status=status.HTTP_400_BAD_REQUEST
            )

        links = CatalogService.get_links(
            self.kind,
            int(ticket_type_id) if ticket_type_id is not None else None
        )
        return Response(
            [CatalogService.link_data(self.kind, link) for link in links],
            status=status.HTTP_200_OK
        )

    def post(self, request):
        serializer = TicketTypeLinkSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        link, created = CatalogService.link(self.kind, **serializer.validated_data)

        return Response(
            CatalogService.link_data(self.kind, link),
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def delete(self, request):
        serializer = TicketTypeLinkSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        CatalogService.unlink(self.kind, **serializer.validated_data)
        return Response(status=status.HTTP_204_NO_CONTENT)


_ticket_type_filter = openapi.Parameter(
    'ticket_type_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=False
)


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List ticket type / attraction associations",
    manual_parameters=[_ticket_type_filter], tags=['Ticket Types']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Include an attraction in a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Remove an attraction from a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
class TicketAttractionView(TicketTypeLinkView):
    kind = 'attraction'


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List ticket type / show associations",
    manual_parameters=[_ticket_type_filter], tags=['Ticket Types']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Include a show in a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Remove a show from a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
class TicketShowView(TicketTypeLinkView):
    kind = 'show'


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="List ticket type / service associations",
    manual_parameters=[_ticket_type_filter], tags=['Ticket Types']))
@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Include a service in a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
@method_decorator(name='delete', decorator=swagger_auto_schema(
    operation_description="Remove a service from a ticket type (staff)",
    request_body=TicketTypeLinkSerializer, security=[{'Bearer': []}], tags=['Ticket Types']))
class TicketServiceView(TicketTypeLinkView):
    kind = 'service'
