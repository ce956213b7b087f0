from __future__ import annotations

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.models import PermissionsMixin
from django.db import models

from apps.core.models import BaseModel


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: object) -> "User":
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        extra_fields.setdefault("handle", email.split("@")[0][:30])
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: object) -> "User":
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str, **extra_fields: object) -> "User":
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    email = models.EmailField(unique=True)
    handle = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=120, blank=True)
    photo = models.URLField(blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["handle"]

    class Meta:
        indexes = [
            models.Index(fields=["handle"], name="users_user_handle_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"{self.handle}<{self.email}>"

    @property
    def display_name(self) -> str:
        return self.name or self.handle


class UserSettings(BaseModel):
    class FriendsPrivacy(models.TextChoices):
        PUBLIC = "public", "Public"
        FRIENDS = "friends", "Friends"
        PRIVATE = "private", "Private"

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="settings")
    friends_privacy = models.CharField(
        max_length=16, choices=FriendsPrivacy.choices, default=FriendsPrivacy.PUBLIC
    )
    role = models.CharField(max_length=32, blank=True, default="member")

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"Settings<{self.user_id}>"
