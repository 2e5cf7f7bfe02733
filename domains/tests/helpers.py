from decimal import Decimal

from django.contrib.auth import get_user_model

from checkouts.models import Checkout, Gateway, Product


def create_user(email="merchant@example.com"):
    return get_user_model().objects.create_user(
        email=email,
        password="pass1234",
        username=email,
    )


def create_checkout(user, name="Checkout Principal", domain=None):
    product = Product.objects.create(user=user, name=f"{name} product", price=Decimal("197.00"))
    gateway = Gateway.objects.create(user=user)
    return Checkout.objects.create(user=user, name=name, product=product, gateway=gateway, domain=domain)
