import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Excursion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[("exc", "Экскурсия"), ("tour", "Тур"), ("vip", "VIP")],
                        default="exc",
                        max_length=10,
                    ),
                ),
                (
                    "subtype",
                    models.CharField(
                        choices=[
                            ("group", "Групповая"),
                            ("individual", "Индивидуальная"),
                            ("personal", "Персональная"),
                        ],
                        default="group",
                        max_length=12,
                    ),
                ),
                ("price_adult", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("price_children", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "props",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="booking_before {day, hour}, duration, languages, location, transfer {price}",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("ACTIVE", "Активна"), ("DISABLED", "Отключена")],
                        default="ACTIVE",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="excursions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Экскурсия",
                "verbose_name_plural": "Экскурсии",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["type", "subtype"], name="excursions__type_6c1e2a_idx"),
                    models.Index(fields=["status"], name="excursions__status_0b7d41_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExcursionTime",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(blank=True, null=True)),
                ("time", models.TimeField()),
                ("duration", models.DurationField(blank=True, null=True)),
                (
                    "excursion",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="times",
                        to="excursions.excursion",
                    ),
                ),
            ],
            options={
                "verbose_name": "Сеанс экскурсии",
                "verbose_name_plural": "Сеансы экскурсий",
                "ordering": ["time"],
            },
        ),
        migrations.CreateModel(
            name="ExcursionTimePoint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("address", models.CharField(blank=True, max_length=255)),
                (
                    "price_adult",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Цена для точки; по умолчанию цена экскурсии.",
                        max_digits=12,
                        null=True,
                    ),
                ),
                ("price_children", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                (
                    "excursion",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="points",
                        to="excursions.excursion",
                    ),
                ),
                (
                    "excursion_time",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="points",
                        to="excursions.excursiontime",
                    ),
                ),
            ],
            options={
                "verbose_name": "Точка сбора",
                "verbose_name_plural": "Точки сбора",
            },
        ),
        migrations.CreateModel(
            name="MapLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("lat", models.DecimalField(decimal_places=6, max_digits=9)),
                ("lng", models.DecimalField(decimal_places=6, max_digits=9)),
                ("address", models.CharField(blank=True, max_length=255)),
                (
                    "point",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="map_location",
                        to="excursions.excursiontimepoint",
                    ),
                ),
            ],
            options={
                "verbose_name": "Точка на карте",
                "verbose_name_plural": "Точки на карте",
            },
        ),
    ]
