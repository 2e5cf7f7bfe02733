# Generated manually for accounts app

import accounts.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="License",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "key",
                    models.CharField(default=accounts.models._license_key, editable=False, max_length=64, unique=True),
                ),
                ("client_email", models.EmailField(max_length=254)),
                ("client_name", models.CharField(blank=True, max_length=255)),
                ("plan", models.CharField(default="lifetime", max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("suspended", "Suspended"), ("refunded", "Refunded")],
                        default="active",
                        max_length=10,
                    ),
                ),
                ("allowed_domain", models.CharField(blank=True, max_length=253)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="licenses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at",),
            },
        ),
    ]
