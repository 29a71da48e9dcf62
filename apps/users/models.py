"""User domain models for the excursion booking platform.

The platform differentiates four roles: a buyer books excursions, a
partner owns excursions, an employee works for a partner and redeems
tickets, an admin operates the platform.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """Менеджер пользователей, использующий email в качестве логина."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email обязателен для создания пользователя.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.BUYER)
        return self._create_user(email, password, **extra_fields)

    def find_or_create_buyer(self, email: str, phone: str = "", first_name: str = "", last_name: str = "",
                             patronymic: str = ""):
        """Покупатель по email; новый создаётся без пароля."""
        user = self.filter(email__iexact=self.normalize_email(email)).first()
        if user is not None:
            return user
        return self.create_user(
            email,
            phone=phone or "",
            first_name=first_name or "",
            last_name=last_name or "",
            patronymic=patronymic or "",
        )

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Суперпользователь должен иметь is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Суперпользователь должен иметь is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Пользователь платформы."""

    class RoleChoices(models.TextChoices):
        BUYER = "buyer", _("Покупатель")
        PARTNER = "partner", _("Партнёр")
        EMPLOYEE = "employee", _("Сотрудник партнёра")
        ADMIN = "admin", _("Администратор")

    username = models.CharField(
        _("Отображаемое имя"),
        max_length=150,
        blank=True,
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(_("Телефон"), max_length=20, blank=True)
    patronymic = models.CharField(_("Отчество"), max_length=150, blank=True)
    role = models.CharField(
        _("Роль"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.BUYER,
    )
    employer = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="employees",
        help_text=_("Партнёр, от имени которого сотрудник погашает билеты."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("Пользователь")
        verbose_name_plural = _("Пользователи")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    def is_partner(self) -> bool:
        return self.role == self.RoleChoices.PARTNER

    def is_employee(self) -> bool:
        return self.role == self.RoleChoices.EMPLOYEE

    def is_platform_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_superuser

    def acts_for(self, owner_id: int) -> bool:
        """Пользователь - сам партнёр либо его сотрудник."""
        return self.pk == owner_id or (self.employer_id is not None and self.employer_id == owner_id)


# Short alias used by tests
User = CustomUser
