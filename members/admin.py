from django.contrib import admin

from .models import AccessGrant, Content, Lesson, MemberArea, Module, Track, TrackItem


@admin.register(MemberArea)
class MemberAreaAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "user", "domain", "created_at")
    search_fields = ("name", "user__email")


@admin.register(AccessGrant)
class AccessGrantAdmin(admin.ModelAdmin):
    list_display = ("email", "member_area", "product", "created_at")
    search_fields = ("email", "member_area__name")


class ModuleInline(admin.TabularInline):
    model = Module
    extra = 0


class LessonInline(admin.TabularInline):
    model = Lesson
    extra = 0


class TrackItemInline(admin.TabularInline):
    model = TrackItem
    extra = 0


@admin.register(Content)
class ContentAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "member_area", "is_free", "created_at")
    list_filter = ("type", "is_free")
    search_fields = ("title", "member_area__name")
    inlines = [ModuleInline]


@admin.register(Module)
class ModuleAdmin(admin.ModelAdmin):
    list_display = ("title", "content", "order_index", "is_free")
    search_fields = ("title", "content__title")
    inlines = [LessonInline]


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ("title", "module", "content_type", "order_index", "is_free")
    list_filter = ("content_type",)
    search_fields = ("title", "module__title")


@admin.register(Track)
class TrackAdmin(admin.ModelAdmin):
    list_display = ("title", "member_area", "type", "position", "is_visible")
    list_filter = ("type", "is_visible")
    inlines = [TrackItemInline]
