from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from apps.accounts.permissions import IsParkStaff

from .serializers import (
    TicketSerializer,
    TicketCreateSerializer,
    TicketUpdateSerializer,
    TicketValidateSerializer,
)
from .services import TicketService


class TicketListCreateView(APIView):
    """
    API endpoint for a user's tickets
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Tickets of the current user, newest first. Tickets whose day is over are reported EXPIRED.",
        responses={
            200: TicketSerializer(many=True),
            401: openapi.Response(description="Authentication required"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def get(self, request):
        tickets = TicketService.list_for_user(request.user)
        serializer = TicketSerializer(tickets, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Buy a ticket for a given day. The ticket is created ACTIVE with its QR code.",
        request_body=TicketCreateSerializer,
        responses={
            201: openapi.Response(description="Ticket issued", schema=TicketSerializer),
            400: openapi.Response(description="Invalid data or validity date in the past"),
            404: openapi.Response(description="Ticket type or discount not found"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def post(self, request):
        serializer = TicketCreateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ticket = TicketService.issue(request.user, **serializer.validated_data)

        return Response(TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)


class TicketDetailView(APIView):
    """
    API endpoint for a single ticket
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Ticket detail (owner or staff)",
        responses={
            200: TicketSerializer,
            403: openapi.Response(description="Permission denied"),
            404: openapi.Response(description="Ticket not found"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def get(self, request, pk):
        ticket = TicketService.get(pk, request.user)
        return Response(TicketSerializer(ticket).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Update a ticket (staff). Sending `status` overrides the ticket state.",
        request_body=TicketUpdateSerializer,
        responses={
            200: TicketSerializer,
            400: openapi.Response(description="Invalid data or validity date in the past"),
            403: openapi.Response(description="Staff only"),
            404: openapi.Response(description="Ticket, ticket type or discount not found"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def put(self, request, pk):
        serializer = TicketUpdateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ticket = TicketService.update(pk, request.user, serializer.validated_data)
        return Response(TicketSerializer(ticket).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Delete one of your tickets",
        responses={
            200: openapi.Response(description="Ticket deleted"),
            403: openapi.Response(description="Permission denied"),
            404: openapi.Response(description="Ticket not found"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def delete(self, request, pk):
        ticket = TicketService.delete(pk, request.user)

        return Response(
            {'message': 'Ticket successfully deleted', 'raw_code': ticket.raw_code},
            status=status.HTTP_200_OK
        )


class TicketValidateView(APIView):
    """
    API endpoint for staff to validate a ticket at the gate
    """
    permission_classes = [IsParkStaff]

    @swagger_auto_schema(
        operation_description="Redeem a ticket by its QR code. Only ACTIVE tickets for today can be validated, once.",
        request_body=TicketValidateSerializer,
        responses={
            200: openapi.Response(description="Ticket validated", schema=TicketSerializer),
            400: openapi.Response(description="Ticket not active or not valid today"),
            403: openapi.Response(description="Staff only"),
            404: openapi.Response(description="Ticket not found"),
            409: openapi.Response(description="Ticket already used"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def post(self, request):
        serializer = TicketValidateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        ticket = TicketService.redeem(serializer.validated_data['raw_code'], request.user)

        return Response(
            {
                'message': 'Ticket successfully validated',
                'ticket': TicketSerializer(ticket).data
            },
            status=status.HTTP_200_OK
        )


class TicketByCodeView(APIView):
    """
    API endpoint to look a ticket up by its QR code
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Ticket by raw code (owner or staff)",
        responses={
            200: TicketSerializer,
            403: openapi.Response(description="Permission denied"),
            404: openapi.Response(description="Ticket not found"),
        },
        security=[{'Bearer': []}],
        tags=['Tickets']
    )
    def get(self, request, raw_code):
        ticket = TicketService.get_by_code(raw_code, request.user)
        return Response(TicketSerializer(ticket).data, status=status.HTTP_200_OK)
