import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


CARAVAN_TYPE_CHOICES = [
    ("Caravan", "Caravan"),
    ("Folding Camper", "Folding Camper"),
    ("Motorhome", "Motorhome"),
    ("Campervan", "Campervan"),
    ("Slide-on Camper", "Slide-on Camper"),
    ("Fifth Wheeler", "Fifth Wheeler"),
    ("Tent", "Tent"),
    ("Utility Trailer", "Utility Trailer"),
]

MAINTENANCE_CATEGORY_CHOICES = [
    ("Engine", "Engine"),
    ("Tyres", "Tyres"),
    ("Brakes", "Brakes"),
    ("Chassis", "Chassis"),
    ("Electrical", "Electrical"),
    ("Plumbing", "Plumbing"),
    ("Appliance", "Appliance"),
    ("Registration", "Registration"),
    ("General", "General"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("trips", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("make", models.CharField(max_length=100)),
                ("model", models.CharField(max_length=100)),
                ("year", models.PositiveIntegerField()),
                ("gvm", models.FloatField(help_text="Gross Vehicle Mass")),
                ("gcm", models.FloatField(help_text="Gross Combined Mass")),
                ("max_tow_capacity", models.FloatField()),
                ("max_towball_mass", models.FloatField()),
                ("fuel_efficiency", models.FloatField()),
                ("kerb_weight", models.FloatField(blank=True, null=True)),
                ("front_axle_limit", models.FloatField(blank=True, null=True)),
                ("rear_axle_limit", models.FloatField(blank=True, null=True)),
                ("wheelbase", models.FloatField(blank=True, help_text="mm", null=True)),
                ("storage_locations", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vehicles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["make", "model", "id"]},
        ),
        migrations.CreateModel(
            name="WeightDistributionHitch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("type", models.CharField(max_length=100)),
                ("max_capacity_kg", models.FloatField()),
                ("min_capacity_kg", models.FloatField(blank=True, null=True)),
                ("has_integrated_sway_control", models.BooleanField(default=False)),
                ("sway_control_type", models.CharField(blank=True, max_length=150, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wdhs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "weight distribution hitch",
                "verbose_name_plural": "weight distribution hitches",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="Caravan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=CARAVAN_TYPE_CHOICES, default="Caravan", max_length=30)),
                ("make", models.CharField(max_length=100)),
                ("model", models.CharField(max_length=100)),
                ("year", models.PositiveIntegerField()),
                ("tare_mass", models.FloatField()),
                ("atm", models.FloatField(help_text="Aggregate Trailer Mass")),
                ("gtm", models.FloatField(help_text="Gross Trailer Mass")),
                ("max_towball_download", models.FloatField()),
                ("number_of_axles", models.PositiveSmallIntegerField(default=1)),
                ("axle_group_rating", models.FloatField(blank=True, null=True)),
                ("number_of_gas_bottles", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("gas_bottle_capacity_kg", models.FloatField(blank=True, null=True)),
                ("tyre_size", models.CharField(blank=True, max_length=50, null=True)),
                ("tyre_load_rating", models.PositiveIntegerField(blank=True, null=True)),
                ("tyre_speed_rating", models.CharField(blank=True, max_length=5, null=True)),
                ("recommended_tyre_pressure_psi", models.FloatField(blank=True, null=True)),
                ("overall_length", models.FloatField(blank=True, null=True)),
                ("body_length", models.FloatField(blank=True, null=True)),
                ("overall_height", models.FloatField(blank=True, null=True)),
                ("hitch_to_axle_center_distance", models.FloatField(blank=True, null=True)),
                ("inter_axle_spacing", models.FloatField(blank=True, null=True)),
                ("storage_locations", models.JSONField(blank=True, default=list)),
                ("water_tanks", models.JSONField(blank=True, default=list)),
                ("diagrams", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="caravans",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "wdh",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="caravans",
                        to="vehicles.weightdistributionhitch",
                    ),
                ),
            ],
            options={"ordering": ["make", "model", "id"]},
        ),
        migrations.CreateModel(
            name="CaravanInventory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("items", models.JSONField(blank=True, default=list)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "caravan",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory",
                        to="vehicles.caravan",
                    ),
                ),
            ],
            options={"verbose_name_plural": "caravan inventories"},
        ),
        migrations.CreateModel(
            name="FuelLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateTimeField()),
                ("odometer", models.FloatField()),
                ("litres", models.FloatField()),
                ("price_per_litre", models.FloatField()),
                ("total_cost", models.FloatField()),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "assigned_trip",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fuel_logs",
                        to="trips.trip",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fuel_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "vehicle",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fuel_logs",
                        to="vehicles.vehicle",
                    ),
                ),
            ],
            options={"verbose_name_plural": "fuel log entries", "ordering": ["-date", "-id"]},
        ),
        migrations.CreateModel(
            name="MaintenanceTask",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("asset_id", models.CharField(max_length=64)),
                ("asset_name", models.CharField(max_length=200)),
                ("task_name", models.CharField(max_length=200)),
                (
                    "category",
                    models.CharField(choices=MAINTENANCE_CATEGORY_CHOICES, default="General", max_length=20),
                ),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("due_odometer", models.FloatField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("is_completed", models.BooleanField(default=False)),
                ("completed_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="maintenance_tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["is_completed", "due_date", "id"]},
        ),
    ]
