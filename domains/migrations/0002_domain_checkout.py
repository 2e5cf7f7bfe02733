# Generated manually for domains app

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("domains", "0001_initial"),
        ("checkouts", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="domain",
            name="checkout",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="default_domains",
                to="checkouts.checkout",
            ),
        ),
    ]
