from django.db import migrations


def create_default_values(apps, schema_editor):
    AppConfig = apps.get_model('appconfig', 'AppConfig')

    values = [
        {
            'key': 'time_min_booking',
            'value': {'vip': 3, 'individual': 2, 'group': 1},
            'description': 'За сколько дней до сеанса закрывается бронь (по типу экскурсии)',
        },
        {
            'key': 'percentage_penalty',
            'value': 20,
            'description': 'Штраф при возврате позже чем за сутки до экскурсии, %',
        },
        {
            'key': 'expired_days',
            'value': 1,
            'description': 'Сколько дней после начала экскурсии заказ считается действующим',
        },
    ]

    for value in values:
        AppConfig.objects.get_or_create(key=value['key'], defaults=value)


def delete_default_values(apps, schema_editor):
    AppConfig = apps.get_model('appconfig', 'AppConfig')
    AppConfig.objects.filter(key__in=['time_min_booking', 'percentage_penalty', 'expired_days']).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('appconfig', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_default_values, delete_default_values),
    ]
