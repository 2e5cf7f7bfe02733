from django.contrib import admin

from .models import Checkout, Gateway, Order, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "price", "active", "created_at")
    list_filter = ("active",)
    search_fields = ("name", "user__email")


@admin.register(Gateway)
class GatewayAdmin(admin.ModelAdmin):
    list_display = ("provider", "user", "active", "created_at")
    list_filter = ("provider", "active")
    search_fields = ("user__email",)
    exclude = ("private_key", "webhook_secret")


@admin.register(Checkout)
class CheckoutAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "user", "product", "domain", "active")
    list_filter = ("active",)
    search_fields = ("name", "slug", "user__email")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "checkout", "customer_email", "amount", "status", "payment_method", "created_at")
    list_filter = ("status", "payment_method")
    search_fields = ("customer_email", "customer_name")
    ordering = ("-created_at",)
