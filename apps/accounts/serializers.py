from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for visitor registration
    """
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={'input_type': 'password'},
        help_text="At least 8 characters"
    )

    def validate_email(self, value):
        """
        Emails are unique regardless of case
        """
        cleaned = User.objects.normalize_email(value).lower()

        if User.objects.filter(email__iexact=cleaned).exists():
            raise serializers.ValidationError("A user with this email already exists")

        return cleaned

    def validate(self, attrs):
        candidate = User(
            email=attrs['email'],
            first_name=attrs['first_name'],
            last_name=attrs['last_name'],
        )
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_email(self, value):
        return value.lower()


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for user profile
    """
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'role',
            'profile_image',
            'allow_notifications',
            'push_notifications',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'email', 'role', 'created_at', 'updated_at']


class TokenResponseSerializer(serializers.Serializer):
    """
    Serializer for JWT token response
    """
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserProfileSerializer()


class PasswordChangeSerializer(serializers.Serializer):
    """
    Serializer for changing the password of the logged-in user
    """
    current_password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    new_password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={'input_type': 'password'},
        help_text="At least 8 characters"
    )

    def validate_new_password(self, value):
        try:
            validate_password(value, user=self.context.get('user'))
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value
