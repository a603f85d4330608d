# funnels/models.py
import logging
import secrets
import string
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models, transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.text import slugify

from shared.constants import FunnelStatus
from shared.utils import format_money

logger = logging.getLogger(__name__)

SLUG_SUFFIX_CHARS = string.ascii_lowercase + string.digits


def random_suffix(length=6):
    return ''.join(secrets.choice(SLUG_SUFFIX_CHARS) for _ in range(length))


class Funnel(models.Model):
    TYPE_SALES = 'sales'
    TYPE_LEAD = 'lead'
    TYPE_WEBINAR = 'webinar'
    TYPE_COURSE = 'course'

    TYPE_CHOICES = (
        (TYPE_SALES, 'Sales Funnel'),
        (TYPE_LEAD, 'Lead Generation'),
        (TYPE_WEBINAR, 'Webinar Funnel'),
        (TYPE_COURSE, 'Course Funnel'),
    )

    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='funnels'
    )
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_SALES)
    status = models.CharField(max_length=20, choices=FunnelStatus.CHOICES, default=FunnelStatus.DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    settings = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'funnels'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = f"{slugify(self.name)[:240]}-{random_suffix()}"
        super().save(*args, **kwargs)

    @property
    def is_published(self):
        return self.status == FunnelStatus.PUBLISHED

    def publish(self):
        self.status = FunnelStatus.PUBLISHED
        self.published_at = timezone.now()
        self.save(update_fields=['status', 'published_at', 'updated_at'])
        logger.info(f"Funnel {self.pk} published")

    def unpublish(self):
        self.status = FunnelStatus.DRAFT
        self.save(update_fields=['status', 'updated_at'])
        logger.info(f"Funnel {self.pk} unpublished")

    def archive(self):
        self.status = FunnelStatus.ARCHIVED
        self.save(update_fields=['status', 'updated_at'])
        logger.info(f"Funnel {self.pk} archived")

    @transaction.atomic
    def duplicate(self, name=None):
        """Draft copy of this funnel with all of its steps."""
        copy = Funnel.objects.create(
            user=self.user,
            name=name or f"{self.name} (Copy)",
            description=self.description,
            type=self.type,
            status=FunnelStatus.DRAFT,
            settings=dict(self.settings or {}),
        )
        FunnelStep.objects.bulk_create([
            FunnelStep(
                funnel=copy,
                name=step.name,
                slug=step.slug,
                type=step.type,
                sort_order=step.sort_order,
                is_active=step.is_active,
                settings=dict(step.settings or {}),
            )
            for step in self.steps.all()
        ])
        logger.info(f"Funnel {self.pk} duplicated as {copy.pk}")
        return copy

    @property
    def total_revenue(self):
        total = FunnelOrder.objects.filter(session__funnel=self).aggregate(total=Sum('funnel_revenue'))['total']
        return total or Decimal('0')

    @property
    def formatted_revenue(self):
        return format_money(self.total_revenue)

    @property
    def total_visitors(self):
        return self.sessions.count()

    @property
    def total_conversions(self):
        return self.sessions.filter(status=FunnelSession.STATUS_CONVERTED).count()

    @property
    def conversion_rate(self):
        visitors = self.total_visitors
        if not visitors:
            return 0
        return round(self.total_conversions / visitors * 100, 2)


class FunnelStep(models.Model):
    TYPE_CHOICES = (
        ('landing', 'Landing Page'),
        ('sales', 'Sales Page'),
        ('optin', 'Opt-in Page'),
        ('checkout', 'Checkout'),
        ('upsell', 'Upsell'),
        ('downsell', 'Downsell'),
        ('thankyou', 'Thank You'),
    )

    funnel = models.ForeignKey(Funnel, on_delete=models.CASCADE, related_name='steps')
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='landing')
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    settings = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'funnel_steps'
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"{self.funnel.name}: {self.name}"


class FunnelSession(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_CONVERTED = 'converted'
    STATUS_ABANDONED = 'abandoned'

    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_CONVERTED, 'Converted'),
        (STATUS_ABANDONED, 'Abandoned'),
    )

    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    funnel = models.ForeignKey(Funnel, on_delete=models.CASCADE, related_name='sessions')
    visitor_id = models.CharField(max_length=64, db_index=True)
    current_step = models.ForeignKey(
        FunnelStep, on_delete=models.SET_NULL, null=True, blank=True, related_name='sessions'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    utm_source = models.CharField(max_length=255, blank=True)
    utm_medium = models.CharField(max_length=255, blank=True)
    utm_campaign = models.CharField(max_length=255, blank=True)
    started_at = models.DateTimeField(default=timezone.now)
    converted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'funnel_sessions'
        ordering = ['-started_at']
        indexes = [
            models.Index(fields=['funnel', 'started_at']),
        ]

    def __str__(self):
        return f"Session {self.visitor_id} on {self.funnel.name}"


class FunnelOrder(models.Model):
    ORDER_TYPE_CHOICES = (
        ('main', 'Main'),
        ('upsell', 'Upsell'),
        ('downsell', 'Downsell'),
        ('bump', 'Order Bump'),
    )

    session = models.ForeignKey(FunnelSession, on_delete=models.CASCADE, related_name='orders')
    step = models.ForeignKey(FunnelStep, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES, default='main')
    funnel_revenue = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    customer_email = models.EmailField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'funnel_orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_order_type_display()} order {format_money(self.funnel_revenue)}"


class FunnelAnalytics(models.Model):
    """Daily totals per funnel (step null) and per step."""

    funnel = models.ForeignKey(Funnel, on_delete=models.CASCADE, related_name='analytics')
    step = models.ForeignKey(FunnelStep, on_delete=models.CASCADE, null=True, blank=True, related_name='analytics')
    date = models.DateField()
    unique_visitors = models.PositiveIntegerField(default=0)
    pageviews = models.PositiveIntegerField(default=0)
    conversions = models.PositiveIntegerField(default=0)
    revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    avg_time_on_page = models.PositiveIntegerField(default=0, help_text="Seconds")

    class Meta:
        db_table = 'funnel_analytics'
        ordering = ['date']
        indexes = [
            models.Index(fields=['funnel', 'date']),
        ]

    def __str__(self):
        return f"{self.funnel.name} {self.date}"
