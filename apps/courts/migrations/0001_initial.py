import django.core.validators
from django.db import migrations, models

import apps.courts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Court",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                ("hourly_rate", models.PositiveIntegerField(help_text="Price per hour in minor currency units.")),
                (
                    "opening_hour",
                    models.PositiveSmallIntegerField(
                        default=apps.courts.models.default_opening_hour,
                        help_text="First bookable hour of the day (0-22).",
                        validators=[django.core.validators.MaxValueValidator(22)],
                    ),
                ),
                (
                    "closing_hour",
                    models.PositiveSmallIntegerField(
                        default=apps.courts.models.default_closing_hour,
                        help_text="Hour at which the last slot ends (1-23).",
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(23),
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Court",
                "verbose_name_plural": "Courts",
                "db_table": "courts",
                "ordering": ["name"],
            },
        ),
        migrations.AddConstraint(
            model_name="court",
            constraint=models.CheckConstraint(
                check=models.Q(("closing_hour__gt", models.F("opening_hour"))),
                name="court_valid_operating_hours",
            ),
        ),
    ]
