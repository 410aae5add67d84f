import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Driver',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vehicle_type', models.CharField(max_length=50)),
                ('vehicle_model', models.CharField(blank=True, default='', max_length=100)),
                ('vehicle_plate', models.CharField(max_length=20)),
                ('vehicle_color', models.CharField(blank=True, default='', max_length=30)),
                ('vehicle_capacity', models.PositiveSmallIntegerField(default=4, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(8)])),
                ('is_available', models.BooleanField(default=False)),
                ('current_latitude', models.CharField(blank=True, max_length=20, null=True)),
                ('current_longitude', models.CharField(blank=True, max_length=20, null=True)),
                ('rating', models.PositiveSmallIntegerField(default=5)),
                ('total_rides', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='driver_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'drivers',
                'ordering': ['id'],
            },
        ),
    ]
