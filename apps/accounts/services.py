import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from django.utils import timezone

from apps.notifications.services import NotificationService

logger = logging.getLogger(__name__)

User = get_user_model()


class AccountService:
    """
    Service for visitor registration and login
    """

    @staticmethod
    @transaction.atomic
    def register_user(email, password, first_name, last_name):
        """
        Create a visitor account and queue its welcome notification
        """
        user = User.objects.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )

        NotificationService.create(
            user=user,
            title='Welcome!',
            message=f'Hi {first_name}, your registration was successful!',
            send_at=timezone.now(),
        )

        logger.info("Registered user %s", user.pk)
        return user

    @staticmethod
    def login(request, email, password):
        """
        Return the active user matching the credentials, None otherwise
        """
        user = authenticate(request, email=email, password=password)

        if user is None:
            logger.info("Failed login attempt for %s", email)
            return None

        return user

    @staticmethod
    def change_password(user, current_password, new_password):
        """
        Replace the password after checking the current one.
        Returns False when the current password does not match.
        """
        if not user.check_password(current_password):
            logger.info("Rejected password change for user %s", user.pk)
            return False

        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])

        logger.info("Password changed for user %s", user.pk)
        return True
