from django.contrib import admin
from django.contrib.auth import get_user_model

from .models import License


User = get_user_model()


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "username", "company_name", "is_active", "is_staff")
    list_filter = ("is_staff", "is_active", "is_superuser")
    search_fields = ("email", "username", "company_name")
    ordering = ("email",)


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    list_display = ("key", "client_email", "plan", "status", "allowed_domain", "activated_at", "user")
    list_filter = ("status", "plan")
    search_fields = ("key", "client_email", "client_name", "allowed_domain")
    readonly_fields = ("key", "activated_at", "created_at")
