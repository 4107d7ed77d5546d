from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from django.conf import settings
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    UserProfileSerializer,
    PasswordChangeSerializer,
    TokenResponseSerializer
)
from .services import AccountService


def _set_cookie(response, key, value, max_age):
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        path='/',
        domain=None,
        secure=settings.COOKIE_SECURE,
        httponly=settings.COOKIE_HTTPONLY,
        samesite=settings.COOKIE_SAMESITE,
    )


def set_jwt_cookies(response, refresh_token):
    """
    Helper function to set JWT tokens in HTTP-only cookies
    """
    _set_cookie(
        response,
        settings.COOKIE_ACCESS_TOKEN_NAME,
        str(refresh_token.access_token),
        int(settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds()),
    )
    _set_cookie(
        response,
        settings.COOKIE_REFRESH_TOKEN_NAME,
        str(refresh_token),
        int(settings.SIMPLE_JWT['REFRESH_TOKEN_LIFETIME'].total_seconds()),
    )
    return response


def clear_jwt_cookies(response):
    """
    Helper function to clear JWT cookies (for logout)
    """
    _set_cookie(response, settings.COOKIE_ACCESS_TOKEN_NAME, '', 0)
    _set_cookie(response, settings.COOKIE_REFRESH_TOKEN_NAME, '', 0)
    return response


class RegisterView(APIView):
    """
    API endpoint to register a visitor account
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_description="Register a visitor account. A welcome notification is queued for the new user.",
        request_body=RegisterSerializer,
        responses={
            201: openapi.Response(description="User registered", schema=UserProfileSerializer),
            400: openapi.Response(description="Invalid data or email already registered"),
        },
        tags=['Authentication']
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = AccountService.register_user(**serializer.validated_data)

        return Response(
            UserProfileSerializer(user).data,
            status=status.HTTP_201_CREATED
        )


class LoginView(APIView):
    """
    API endpoint to exchange credentials for a JWT pair
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_description="Log in with email and password. Tokens are returned in the body and set as HTTP-only cookies.",
        request_body=LoginSerializer,
        responses={
            200: openapi.Response(description="Login successful", schema=TokenResponseSerializer),
            400: openapi.Response(description="Invalid data"),
            401: openapi.Response(description="Incorrect email or password"),
        },
        tags=['Authentication']
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = AccountService.login(
            request,
            serializer.validated_data['email'],
            serializer.validated_data['password'],
        )

        if user is None:
            return Response(
                {'error': 'Incorrect email or password'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        refresh = RefreshToken.for_user(user)

        response = Response(
            {
                'access': str(refresh.access_token),
                'refresh': str(refresh),
                'user': UserProfileSerializer(user).data,
            },
            status=status.HTTP_200_OK
        )

        set_jwt_cookies(response, refresh)

        return response


class LogoutView(APIView):
    """
    API endpoint to logout user
    Clears JWT cookies
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Log out and clear the JWT cookies",
        responses={
            200: openapi.Response(description="Logged out"),
            401: openapi.Response(description="Authentication required"),
        },
        security=[{'Bearer': []}],
        tags=['Authentication']
    )
    def post(self, request):
        response = Response(
            {'message': 'Logged out successfully'},
            status=status.HTTP_200_OK
        )

        clear_jwt_cookies(response)

        return response


class RefreshTokenView(APIView):
    """
    API endpoint to refresh access token
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_description="Refresh the access token using the refresh token cookie (or a `refresh` body field)",
        responses={
            200: openapi.Response(description="Token refreshed"),
            401: openapi.Response(description="Invalid refresh token"),
        },
        tags=['Authentication']
    )
    def post(self, request):
        refresh_token = (
            request.COOKIES.get(settings.COOKIE_REFRESH_TOKEN_NAME)
            or request.data.get('refresh')
        )

        if not refresh_token:
            return Response(
                {'error': 'Refresh token not found'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            return Response(
                {'error': 'Invalid refresh token'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        access_token = refresh.access_token

        response = Response(
            {'message': 'Token refreshed successfully', 'access': str(access_token)},
            status=status.HTTP_200_OK
        )

        _set_cookie(
            response,
            settings.COOKIE_ACCESS_TOKEN_NAME,
            str(access_token),
            int(settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds()),
        )

        return response


class UserProfileView(APIView):
    """
    API endpoint to view and update user profile
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Current user's profile",
        responses={
            200: openapi.Response(description="User profile", schema=UserProfileSerializer),
            401: openapi.Response(description="Authentication required"),
        },
        security=[{'Bearer': []}],
        tags=['User Profile']
    )
    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        operation_description="Update name, profile image URL and notification preferences",
        request_body=UserProfileSerializer,
        responses={
            200: openapi.Response(description="Profile updated", schema=UserProfileSerializer),
            400: openapi.Response(description="Invalid data"),
            401: openapi.Response(description="Authentication required"),
        },
        security=[{'Bearer': []}],
        tags=['User Profile']
    )
    def patch(self, request):
        serializer = UserProfileSerializer(
            request.user,
            data=request.data,
            partial=True
        )

        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_200_OK)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class UserProfilePasswordView(APIView):
    """
    API endpoint to change the current user's password
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Change password. The current password must be provided.",
        request_body=PasswordChangeSerializer,
        responses={
            200: openapi.Response(description="Password updated"),
            400: openapi.Response(description="Missing fields or new password too weak"),
            401: openapi.Response(description="Current password is incorrect"),
        },
        security=[{'Bearer': []}],
        tags=['User Profile']
    )
    def put(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={'user': request.user})

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        changed = AccountService.change_password(
            request.user,
            serializer.validated_data['current_password'],
            serializer.validated_data['new_password'],
        )

        if not changed:
            return Response(
                {'error': 'Current password is incorrect'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        return Response(
            {'message': 'Password updated successfully'},
            status=status.HTTP_200_OK
        )
