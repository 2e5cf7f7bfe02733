import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


# -----------------------------
# MODELS - accounts/models.py
# -----------------------------


class User(AbstractUser):
	email = models.EmailField(unique=True)
	company_name = models.CharField(max_length=255, blank=True)
	USERNAME_FIELD = 'email'
	REQUIRED_FIELDS = ['username']

	def __str__(self):
		return self.email


class LicenseState(models.TextChoices):
	ACTIVE = 'active', 'Active'
	SUSPENDED = 'suspended', 'Suspended'
	REFUNDED = 'refunded', 'Refunded'


def _license_key():
	return uuid.uuid4().hex.upper()


class License(models.Model):
	user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='licenses')
	key = models.CharField(max_length=64, unique=True, default=_license_key, editable=False)
	client_email = models.EmailField()
	client_name = models.CharField(max_length=255, blank=True)
	plan = models.CharField(max_length=50, default='lifetime')
	status = models.CharField(max_length=10, choices=LicenseState.choices, default=LicenseState.ACTIVE)
	allowed_domain = models.CharField(max_length=253, blank=True)
	activated_at = models.DateTimeField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ('-created_at',)

	def __str__(self):
		return f"{self.key} ({self.client_email})"

	def activate(self, domain):
		self.allowed_domain = domain
		self.activated_at = timezone.now()
		self.save(update_fields=['allowed_domain', 'activated_at'])
