from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class ExpenseCategory(models.TextChoices):
    FOOD = 'FOOD', 'Food'
    TRANSPORT = 'TRANSPORT', 'Transport'
    ACCOMMODATION = 'ACCOMMODATION', 'Accommodation'
    ENTERTAINMENT = 'ENTERTAINMENT', 'Entertainment'
    SHOPPING = 'SHOPPING', 'Shopping'
    UTILITIES = 'UTILITIES', 'Utilities'
    HEALTH = 'HEALTH', 'Health'
    OTHER = 'OTHER', 'Other'


class SplitType(models.TextChoices):
    EQUAL = 'EQUAL', 'Equal'
    EXACT = 'EXACT', 'Exact amounts'
    PERCENTAGE = 'PERCENTAGE', 'Percentage'
    SHARES = 'SHARES', 'Shares'


class PaymentMethod(models.TextChoices):
    PIX = 'PIX', 'Pix'
    CASH = 'CASH', 'Cash'
    TRANSFER = 'TRANSFER', 'Bank transfer'
    CREDIT_CARD = 'CREDIT_CARD', 'Credit card'
    OTHER = 'OTHER', 'Other'


class ActivityType(models.TextChoices):
    EXPENSE_ADDED = 'EXPENSE_ADDED', 'Expense added'
    SETTLEMENT_MADE = 'SETTLEMENT_MADE', 'Settlement made'


class Expense(models.Model):
    """Shared expense paid by one member and split among several."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_paid'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses_created'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=255)
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.OTHER
    )
    split_type = models.CharField(
        max_length=20,
        choices=SplitType.choices,
        default=SplitType.EQUAL
    )
    date = models.DateTimeField(default=timezone.now)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['group', 'date']),
            models.Index(fields=['paid_by', 'date']),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.description} - {self.amount} ({self.group.name})"

    def get_split_total(self):
        """Return the sum of all owed amounts for this expense."""
        from django.db.models import Sum

        return self.splits.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')


class ExpenseSplit(models.Model):
    """One member's owed share of an expense."""

    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='splits'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_splits'
    )

    # Amount owed
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Inputs the amount was derived from (PERCENTAGE / SHARES splits)
    percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    shares = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'expense_splits'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user']),
        ]
        ordering = ['id']

    def __str__(self):
        return f"{self.user.get_display_name()} owes {self.amount} for '{self.expense.description}'"


class Settlement(models.Model):
    """Recorded real-world payment from one member to another."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='settlements'
    )
    from_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='settlements_paid'
    )
    to_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='settlements_received'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='settlements_created'
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.PIX
    )
    note = models.TextField(blank=True)
    settled_at = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'settlements'
        indexes = [
            models.Index(fields=['group', 'settled_at']),
            models.Index(fields=['from_user']),
            models.Index(fields=['to_user']),
        ]
        ordering = ['-settled_at']

    def __str__(self):
        return (
            f"{self.from_user.get_display_name()} paid {self.amount} "
            f"to {self.to_user.get_display_name()}"
        )


class Activity(models.Model):
    """Feed entry written alongside each expense or settlement."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='activities'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activities'
    )

    type = models.CharField(max_length=30, choices=ActivityType.choices)
    description = models.CharField(max_length=500)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'activities'
        indexes = [
            models.Index(fields=['group', 'created_at']),
        ]
        ordering = ['-created_at']
        verbose_name_plural = 'activities'

    def __str__(self):
        return f"{self.get_type_display()}: {self.description}"
