from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SiteOption",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("key", models.CharField(max_length=64, unique=True)),
                ("value", models.JSONField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Site Option",
                "verbose_name_plural": "Site Options",
                "ordering": ["key"],
            },
        ),
    ]
