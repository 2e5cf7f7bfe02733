from django.contrib import admin, messages

from .models import Domain, DomainStatus
from .services import DomainService


@admin.register(Domain)
class DomainAdmin(admin.ModelAdmin):
    list_display = ("domain", "user", "status", "usage", "type", "created_at")
    list_filter = ("status", "usage", "type")
    search_fields = ("domain", "user__email")
    readonly_fields = ("status", "created_at", "updated_at")
    ordering = ("-created_at",)
    actions = ["verify_selected"]

    @admin.action(description="Verify selected domains")
    def verify_selected(self, request, queryset):
        service = DomainService()
        active = 0
        for domain in queryset:
            service.verify(domain)
            if domain.status == DomainStatus.ACTIVE:
                active += 1
        self.message_user(request, f"{active}/{queryset.count()} domain(s) active.", messages.INFO)
