# Generated manually for members app

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("checkouts", "0001_initial"),
        ("members", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Content",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("thumbnail_url", models.URLField(blank=True, max_length=500)),
                (
                    "type",
                    models.CharField(
                        choices=[("course", "Course"), ("pack", "Pack"), ("software", "Software"), ("ebook", "E-book")],
                        default="course",
                        max_length=10,
                    ),
                ),
                ("is_free", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "member_area",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contents",
                        to="members.memberarea",
                    ),
                ),
                ("products", models.ManyToManyField(blank=True, related_name="contents", to="checkouts.product")),
            ],
            options={
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Module",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("order_index", models.PositiveIntegerField(default=0)),
                ("is_free", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "content",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modules",
                        to="members.content",
                    ),
                ),
            ],
            options={
                "ordering": ("order_index", "id"),
            },
        ),
        migrations.CreateModel(
            name="Lesson",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                (
                    "content_type",
                    models.CharField(
                        choices=[
                            ("video", "Video"),
                            ("text", "Text"),
                            ("file", "File"),
                            ("link", "Link"),
                            ("embed", "Embed"),
                        ],
                        default="video",
                        max_length=10,
                    ),
                ),
                ("video_url", models.URLField(blank=True, max_length=500)),
                ("content_text", models.TextField(blank=True)),
                ("file_url", models.URLField(blank=True, max_length=500)),
                ("order_index", models.PositiveIntegerField(default=0)),
                ("duration", models.PositiveIntegerField(blank=True, null=True)),
                ("is_free", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "module",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lessons",
                        to="members.module",
                    ),
                ),
            ],
            options={
                "ordering": ("order_index", "id"),
            },
        ),
        migrations.CreateModel(
            name="Track",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("products", "Products"),
                            ("contents", "Contents"),
                            ("modules", "Modules"),
                            ("lessons", "Lessons"),
                        ],
                        default="contents",
                        max_length=10,
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                ("is_visible", models.BooleanField(default=True)),
                (
                    "card_style",
                    models.CharField(
                        choices=[("vertical", "Vertical"), ("horizontal", "Horizontal")],
                        default="vertical",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "member_area",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracks",
                        to="members.memberarea",
                    ),
                ),
            ],
            options={
                "ordering": ("position", "id"),
            },
        ),
        migrations.CreateModel(
            name="TrackItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_id", models.PositiveBigIntegerField()),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "track",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="members.track",
                    ),
                ),
            ],
            options={
                "ordering": ("position", "id"),
                "unique_together": {("track", "item_id")},
            },
        ),
    ]
