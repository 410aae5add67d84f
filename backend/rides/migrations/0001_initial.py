import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('drivers', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Ride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('pickup_latitude', models.CharField(max_length=20)),
                ('pickup_longitude', models.CharField(max_length=20)),
                ('pickup_address', models.TextField(blank=True, null=True)),
                ('dropoff_latitude', models.CharField(blank=True, max_length=20, null=True)),
                ('dropoff_longitude', models.CharField(blank=True, max_length=20, null=True)),
                ('dropoff_address', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('is_shared', models.BooleanField(default=False)),
                ('max_passengers', models.PositiveSmallIntegerField(default=1)),
                ('current_passengers', models.PositiveSmallIntegerField(default=1)),
                ('base_fare', models.PositiveIntegerField(default=0)),
                ('total_fare', models.PositiveIntegerField(default=0)),
                ('fare_per_passenger', models.PositiveIntegerField(default=0)),
                ('estimated_distance', models.PositiveIntegerField(blank=True, null=True)),
                ('requested_at', models.DateTimeField(auto_now_add=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rides', to=settings.AUTH_USER_MODEL)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='rides', to='drivers.driver')),
            ],
            options={
                'db_table': 'rides',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('current_passengers__lte', models.F('max_passengers'))), name='ride_passengers_within_capacity'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RidePassenger',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('pickup_latitude', models.CharField(max_length=20)),
                ('pickup_longitude', models.CharField(max_length=20)),
                ('pickup_address', models.TextField(blank=True, null=True)),
                ('dropoff_latitude', models.CharField(blank=True, max_length=20, null=True)),
                ('dropoff_longitude', models.CharField(blank=True, max_length=20, null=True)),
                ('dropoff_address', models.TextField(blank=True, null=True)),
                ('fare_share', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('picked_up', 'Picked Up'), ('dropped_off', 'Dropped Off'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shared_ride_seats', to=settings.AUTH_USER_MODEL)),
                ('ride', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='passengers', to='rides.ride')),
            ],
            options={
                'db_table': 'ride_passengers',
                'ordering': ['joined_at', 'id'],
                'constraints': [
                    models.UniqueConstraint(fields=('ride', 'customer'), name='unique_ride_passenger'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Rating',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('comment', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ratings_given', to=settings.AUTH_USER_MODEL)),
                ('driver', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ratings', to='drivers.driver')),
                ('ride', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='rating', to='rides.ride')),
            ],
            options={
                'db_table': 'ratings',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
