import django.db.models.deletion
import uuid
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BillAction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("new", "Создан"),
                            ("holding", "Средства заморожены"),
                            ("confirmed", "Средства списаны"),
                            ("finished", "Зачислено партнёру"),
                            ("refund_requested", "Запрошен возврат"),
                            ("refunded", "Возвращено"),
                            ("canceled", "Заморозка отменена"),
                            ("failed", "Ошибка"),
                        ],
                        default="new",
                        max_length=20,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(default="RUB", max_length=3)),
                ("hold_ref", models.CharField(blank=True, max_length=100)),
                ("capture_ref", models.CharField(blank=True, max_length=100)),
                ("refund_ref", models.CharField(blank=True, max_length=100)),
                ("refunded_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("captured_at", models.DateTimeField(blank=True, null=True)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transaction",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Платёж",
                "verbose_name_plural": "Платежи",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="BillActionEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "operation",
                    models.CharField(
                        choices=[
                            ("hold", "Заморозка"),
                            ("capture", "Списание"),
                            ("cancel_hold", "Отмена заморозки"),
                            ("refund", "Возврат"),
                        ],
                        max_length=20,
                    ),
                ),
                ("idempotency_key", models.CharField(max_length=100)),
                ("amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("reference", models.CharField(blank=True, max_length=100)),
                ("succeeded", models.BooleanField(default=False)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "bill_action",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="finances.billaction",
                    ),
                ),
            ],
            options={
                "verbose_name": "Обращение к платёжному шлюзу",
                "verbose_name_plural": "Обращения к платёжному шлюзу",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("succeeded", True)),
                        fields=("idempotency_key",),
                        name="billactionevent_unique_success",
                    ),
                ],
            },
        ),
    ]
