# checkouts/models.py

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.text import slugify


class GatewayProvider(models.TextChoices):
    MERCADO_PAGO = "mercado_pago", "Mercado Pago"
    STRIPE = "stripe", "Stripe"
    PIX = "pix", "Pix"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    CANCELED = "canceled", "Canceled"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(models.TextChoices):
    CREDIT_CARD = "credit_card", "Credit card"
    PIX = "pix", "Pix"
    BOLETO = "boleto", "Boleto"


class Product(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="products")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name


class Gateway(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="gateways")
    provider = models.CharField(max_length=20, choices=GatewayProvider.choices, default=GatewayProvider.MERCADO_PAGO)
    public_key = models.CharField(max_length=255, blank=True)
    private_key = models.CharField(max_length=255, blank=True)
    webhook_secret = models.CharField(max_length=255, blank=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.get_provider_display()} #{self.pk}"


class Checkout(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="checkouts")
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=160)
    active = models.BooleanField(default=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="checkouts")
    gateway = models.ForeignKey(Gateway, on_delete=models.PROTECT, related_name="checkouts")
    domain = models.ForeignKey(
        "domains.Domain",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="checkouts",
    )
    config = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("user", "slug")
        ordering = ("-created_at",)

    def __str__(self):
        return self.name

    def ensure_slug(self) -> None:
        if self.slug:
            return
        base = slugify(self.name) or "checkout"
        slug = base
        counter = 1
        while Checkout.objects.filter(user=self.user, slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base}-{counter}"
            counter += 1
        self.slug = slug

    def save(self, *args, **kwargs):
        self.ensure_slug()
        super().save(*args, **kwargs)


class Order(models.Model):
    checkout = models.ForeignKey(Checkout, on_delete=models.PROTECT, related_name="orders")
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=30, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.PIX)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self):
        return f"Order #{self.pk} ({self.status})"
