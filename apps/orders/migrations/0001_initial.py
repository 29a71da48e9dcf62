import django.db.models.deletion
import apps.orders.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("excursions", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number_adult", models.PositiveSmallIntegerField(default=1)),
                ("number_children", models.PositiveSmallIntegerField(default=0)),
                (
                    "items",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Снимок заказа: точка, дата и время, языки, трансфер.",
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(default="RUB", max_length=3)),
                (
                    "status",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "NOT_COMPLETED"), (1, "COMPLETED"), (2, "CANCELED"), (3, "SUSPENDED")],
                        default=0,
                    ),
                ),
                ("date_start", models.DateField()),
                ("time_start", models.TimeField()),
                ("date_finish", models.DateTimeField(help_text="Начало сеанса плюс expired_days.")),
                ("date_confirm", models.DateTimeField(blank=True, null=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="confirmed_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "excursion",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="excursions.excursion",
                    ),
                ),
                (
                    "point",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="excursions.excursiontimepoint",
                    ),
                ),
            ],
            options={
                "verbose_name": "Заказ",
                "verbose_name_plural": "Заказы",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["excursion", "point", "date_start", "time_start", "buyer"],
                        name="orders_orde_booking_9f2c1d_idx",
                    ),
                    models.Index(fields=["status"], name="orders_orde_status_4e8a07_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("date_confirm__isnull", True), ("employee__isnull", True))
                            | models.Q(("date_confirm__isnull", False), ("employee__isnull", False))
                        ),
                        name="order_confirm_with_employee",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(max_length=50)),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="complaints",
                        to="orders.order",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="complaints",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Жалоба",
                "verbose_name_plural": "Жалобы",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderRefund",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.TextField(blank=True)),
                ("percent", models.PositiveSmallIntegerField(default=100)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("with_penalty", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refunds",
                        to="orders.order",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_refunds",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Возврат",
                "verbose_name_plural": "Возвраты",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="QrCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "code",
                    models.CharField(default=apps.orders.models.generate_qr_code, max_length=64, unique=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="qr_code",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "QR-код билета",
                "verbose_name_plural": "QR-коды билетов",
            },
        ),
    ]
