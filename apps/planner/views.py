from django.utils.decorators import method_decorator
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import (
    PlannerSerializer,
    PlannerCreateSerializer,
    PlannerUpdateSerializer,
    PlannerAddItemSerializer,
    ServiceBookingSerializer,
    ServiceBookingCreateSerializer,
    ServiceBookingUpdateSerializer,
)
from .services import PlannerService, BookingService


class PlannerListCreateView(APIView):
    """
    API endpoint for the user's planners
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Planners of the current user, newest first",
        responses={200: PlannerSerializer(many=True)},
        security=[{'Bearer': []}],
        tags=['Planners']
    )
    def get(self, request):
        planners = PlannerService.list_for_user(request.user)
        return Response(PlannerSerializer(planners, many=True).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description=(
            "Create a planner on a validated ticket. Attractions, shows and services "
            "not included in the ticket type are left out."
        ),
        request_body=PlannerCreateSerializer,
        responses={
            201: openapi.Response(description="Planner created", schema=PlannerSerializer),
            400: openapi.Response(description="Invalid data or ticket not validated yet"),
            403: openapi.Response(description="Ticket belongs to another user"),
            404: openapi.Response(description="Ticket not found"),
        },
        security=[{'Bearer': []}],
        tags=['Planners']
    )
    def post(self, request):
        serializer = PlannerCreateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        planner = PlannerService.create(request.user, **serializer.validated_data)
        return Response(PlannerSerializer(planner).data, status=status.HTTP_201_CREATED)


class PlannerDetailView(APIView):
    """
    API endpoint for one planner
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Planner detail",
        responses={
            200: PlannerSerializer,
            404: openapi.Response(description="Planner not found"),
        },
        security=[{'Bearer': []}],
        tags=['Planners']
    )
    def get(self, request, pk):
        planner = PlannerService.get(pk, request.user)
        return Response(PlannerSerializer(planner).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description=(
            "Update a planner. Submitted item ids are added to the existing ones; "
            "items no longer included in the ticket type are removed."
        ),
        request_body=PlannerUpdateSerializer,
        responses={
            200: PlannerSerializer,
            400: openapi.Response(description="Invalid data or ticket not validated yet"),
            404: openapi.Response(description="Planner not found"),
        },
        security=[{'Bearer': []}],
        tags=['Planners']
    )
    def put(self, request, pk):
        serializer = PlannerUpdateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        planner = PlannerService.update(pk, request.user, serializer.validated_data)
        return Response(PlannerSerializer(planner).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Delete a planner and its service bookings",
        responses={
            204: openapi.Response(description="Planner deleted"),
            404: openapi.Response(description="Planner not found"),
        },
        security=[{'Bearer': []}],
        tags=['Planners']
    )
    def delete(self, request, pk):
        PlannerService.delete(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PlannerAddItemView(APIView):
    """
    Attach a single catalog item to a planner. Subclasses set ``kind``.
    """
    permission_classes = [IsAuthenticated]
    kind = None

    def patch(self, request, pk):
        serializer = PlannerAddItemSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        planner = PlannerService.add_item(
            pk,
            request.user,
            self.kind,
            serializer.validated_data['item_id']
        )
        return Response(PlannerSerializer(planner).data, status=status.HTTP_200_OK)


def _add_item_schema(kind):
    return swagger_auto_schema(
        operation_description=f"Add one {kind} to a planner. The {kind} must be included in the ticket type.",
        request_body=PlannerAddItemSerializer,
        responses={
            200: PlannerSerializer,
            400: openapi.Response(description=f"Ticket not validated or {kind} not included in the ticket type"),
            404: openapi.Response(description=f"Planner or {kind} not found"),
        },
        security=[{'Bearer': []}],
        tags=['Planners']
    )


@method_decorator(name='patch', decorator=_add_item_schema('attraction'))
class PlannerAddAttractionView(PlannerAddItemView):
    kind = 'attraction'


@method_decorator(name='patch', decorator=_add_item_schema('show'))
class PlannerAddShowView(PlannerAddItemView):
    kind = 'show'


@method_decorator(name='patch', decorator=_add_item_schema('service'))
class PlannerAddServiceView(PlannerAddItemView):
    kind = 'service'


class ServiceBookingListCreateView(APIView):
    """
    API endpoint for the user's service bookings
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Service bookings of the current user",
        responses={200: ServiceBookingSerializer(many=True)},
        security=[{'Bearer': []}],
        tags=['Service Bookings']
    )
    def get(self, request):
        bookings = BookingService.list_for_user(request.user)
        return Response(ServiceBookingSerializer(bookings, many=True).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description=(
            "Book a service from one of your planners. A reminder is scheduled "
            "shortly before the booking if notifications are allowed."
        ),
        request_body=ServiceBookingCreateSerializer,
        responses={
            201: openapi.Response(description="Booking created", schema=ServiceBookingSerializer),
            400: openapi.Response(description="Invalid data or service not included in the ticket type"),
            404: openapi.Response(description="Planner or service not found"),
        },
        security=[{'Bearer': []}],
        tags=['Service Bookings']
    )
    def post(self, request):
        serializer = ServiceBookingCreateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        booking = BookingService.create(request.user, **serializer.validated_data)
        return Response(ServiceBookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class ServiceBookingDetailView(APIView):
    """
    API endpoint for one service booking
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Service booking detail",
        responses={
            200: ServiceBookingSerializer,
            404: openapi.Response(description="Booking not found"),
        },
        security=[{'Bearer': []}],
        tags=['Service Bookings']
    )
    def get(self, request, pk):
        booking = BookingService.get(pk, request.user)
        return Response(ServiceBookingSerializer(booking).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Change time, party size or special requests of a booking",
        request_body=ServiceBookingUpdateSerializer,
        responses={
            200: ServiceBookingSerializer,
            400: openapi.Response(description="Invalid data"),
            404: openapi.Response(description="Booking not found"),
        },
        security=[{'Bearer': []}],
        tags=['Service Bookings']
    )
    def put(self, request, pk):
        serializer = ServiceBookingUpdateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        booking = BookingService.update(pk, request.user, serializer.validated_data)
        return Response(ServiceBookingSerializer(booking).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Cancel a booking",
        responses={
            204: openapi.Response(description="Booking deleted"),
            404: openapi.Response(description="Booking not found"),
        },
        security=[{'Bearer': []}],
        tags=['Service Bookings']
    )
    def delete(self, request, pk):
        BookingService.delete(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
