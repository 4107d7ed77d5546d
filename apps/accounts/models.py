from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager


class UserManager(BaseUserManager):
    """
    Custom user manager where email is the unique identifier
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user with the given email and password.
        """
        if not email:
            raise ValueError('The email must be set')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_staff(self, email, password=None, **extra_fields):
        """
        Create a park staff member (allowed to validate tickets).
        """
        extra_fields['role'] = User.Role.STAFF
        return self.create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser with the given email and password.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.Role.STAFF)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Park visitor or staff member, identified by email
    """

    class Role(models.TextChoices):
        USER = 'USER', 'Visitor'
        STAFF = 'STAFF', 'Staff'

    username = None  # Remove username field

    email = models.EmailField(
        unique=True,
        db_index=True,
        help_text="User's email, used to log in"
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        help_text="USER for visitors, STAFF for park operators"
    )
    profile_image = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Public URL of the profile picture"
    )
    allow_notifications = models.BooleanField(
        default=True,
        help_text="Whether reminders are scheduled for this user"
    )
    push_notifications = models.BooleanField(
        default=True,
        help_text="Whether push delivery is enabled for this user"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def is_park_staff(self):
        return self.role == self.Role.STAFF
