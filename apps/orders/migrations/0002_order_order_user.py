import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name="order",
            name="order_user",
            field=models.ForeignKey(
                blank=True,
                help_text="Кто оформил заказ, если покупали для другого человека.",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="placed_orders",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]
