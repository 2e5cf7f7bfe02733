# members/models.py
from django.conf import settings
from django.db import models
from django.utils.text import slugify


class MemberArea(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="member_areas")
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=160, blank=True)
    domain = models.ForeignKey(
        "domains.Domain",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="member_areas",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or "area"
        super().save(*args, **kwargs)


class AccessGrant(models.Model):
    member_area = models.ForeignKey(MemberArea, on_delete=models.CASCADE, related_name="grants")
    email = models.EmailField()
    product = models.ForeignKey(
        "checkouts.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="access_grants",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("member_area", "email")
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.email} -> {self.member_area}"


class ContentKind(models.TextChoices):
    COURSE = "course", "Course"
    PACK = "pack", "Pack"
    SOFTWARE = "software", "Software"
    EBOOK = "ebook", "E-book"


class LessonType(models.TextChoices):
    VIDEO = "video", "Video"
    TEXT = "text", "Text"
    FILE = "file", "File"
    LINK = "link", "Link"
    EMBED = "embed", "Embed"


class TrackType(models.TextChoices):
    PRODUCTS = "products", "Products"
    CONTENTS = "contents", "Contents"
    MODULES = "modules", "Modules"
    LESSONS = "lessons", "Lessons"


class CardStyle(models.TextChoices):
    VERTICAL = "vertical", "Vertical"
    HORIZONTAL = "horizontal", "Horizontal"


class Content(models.Model):
    member_area = models.ForeignKey(MemberArea, on_delete=models.CASCADE, related_name="contents")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    thumbnail_url = models.URLField(max_length=500, blank=True)
    type = models.CharField(max_length=10, choices=ContentKind.choices, default=ContentKind.COURSE)
    is_free = models.BooleanField(default=False)
    products = models.ManyToManyField("checkouts.Product", blank=True, related_name="contents")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        return self.title


class Module(models.Model):
    content = models.ForeignKey(Content, on_delete=models.CASCADE, related_name="modules")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    order_index = models.PositiveIntegerField(default=0)
    is_free = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("order_index", "id")

    def __str__(self):
        return self.title


class Lesson(models.Model):
    module = models.ForeignKey(Module, on_delete=models.CASCADE, related_name="lessons")
    title = models.CharField(max_length=200)
    content_type = models.CharField(max_length=10, choices=LessonType.choices, default=LessonType.VIDEO)
    video_url = models.URLField(max_length=500, blank=True)
    content_text = models.TextField(blank=True)
    file_url = models.URLField(max_length=500, blank=True)
    order_index = models.PositiveIntegerField(default=0)
    duration = models.PositiveIntegerField(null=True, blank=True)
    is_free = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("order_index", "id")

    def __str__(self):
        return self.title


class Track(models.Model):
    member_area = models.ForeignKey(MemberArea, on_delete=models.CASCADE, related_name="tracks")
    title = models.CharField(max_length=200)
    type = models.CharField(max_length=10, choices=TrackType.choices, default=TrackType.CONTENTS)
    position = models.PositiveIntegerField(default=0)
    is_visible = models.BooleanField(default=True)
    card_style = models.CharField(max_length=10, choices=CardStyle.choices, default=CardStyle.VERTICAL)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("position", "id")

    def __str__(self):
        return self.title


class TrackItem(models.Model):
    # item_id points at a Product, Content, Module or Lesson depending on track.type
    track = models.ForeignKey(Track, on_delete=models.CASCADE, related_name="items")
    item_id = models.PositiveBigIntegerField()
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("position", "id")
        unique_together = ("track", "item_id")

    def __str__(self):
        return f"{self.track} #{self.item_id}"
