from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import NotificationSerializer, ToggleNotificationsSerializer
from .services import NotificationService


class NotificationListView(APIView):
    """
    API endpoint listing the user's delivered notifications
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Notifications already sent to the current user, newest first",
        responses={
            200: NotificationSerializer(many=True),
            401: openapi.Response(description="Authentication required"),
        },
        security=[{'Bearer': []}],
        tags=['Notifications']
    )
    def get(self, request):
        notifications = NotificationService.list_for_user(request.user)
        serializer = NotificationSerializer(notifications, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


class NotificationDetailView(APIView):
    """
    API endpoint to mark a notification read or delete it
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Mark a notification as read",
        responses={
            200: NotificationSerializer,
            404: openapi.Response(description="Notification not found"),
        },
        security=[{'Bearer': []}],
        tags=['Notifications']
    )
    def patch(self, request, pk):
        notification = NotificationService.mark_read(request.user, pk)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Delete a notification",
        responses={
            200: openapi.Response(description="Notification deleted"),
            404: openapi.Response(description="Notification not found"),
        },
        security=[{'Bearer': []}],
        tags=['Notifications']
    )
    def delete(self, request, pk):
        NotificationService.delete(request.user, pk)
        return Response(
            {'message': 'Notification successfully deleted'},
            status=status.HTTP_200_OK
        )


class ToggleNotificationsView(APIView):
    """
    API endpoint to turn push notifications on or off
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Enable or disable push notifications. Disabling marks every unread notification as read.",
        request_body=ToggleNotificationsSerializer,
        responses={
            200: openapi.Response(description="Preference saved"),
            400: openapi.Response(description="Missing or invalid `enabled`"),
        },
        security=[{'Bearer': []}],
        tags=['Notifications']
    )
    def patch(self, request):
        serializer = ToggleNotificationsSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        enabled = serializer.validated_data['enabled']
        NotificationService.set_push_notifications(request.user, enabled)

        return Response(
            {'message': f"Notifications successfully {'enabled' if enabled else 'disabled'}."},
            status=status.HTTP_200_OK
        )
