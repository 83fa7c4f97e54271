import django.core.validators
import uuid6
from django.db import migrations, models

STATE_CHOICES = [
    (state, state)
    for state in (
        "Abia",
        "Adamawa",
        "Akwa Ibom",
        "Anambra",
        "Bauchi",
        "Bayelsa",
        "Benue",
        "Borno",
        "Cross River",
        "Delta",
        "Ebonyi",
        "Edo",
        "Ekiti",
        "Enugu",
        "FCT",
        "Gombe",
        "Imo",
        "Jigawa",
        "Kaduna",
        "Kano",
        "Katsina",
        "Kebbi",
        "Kogi",
        "Kwara",
        "Lagos",
        "Nasarawa",
        "Niger",
        "Ogun",
        "Ondo",
        "Osun",
        "Oyo",
        "Plateau",
        "Rivers",
        "Sokoto",
        "Taraba",
        "Yobe",
        "Zamfara",
    )
]

COLOR_CHOICES = [
    (color, color)
    for color in (
        "Navy Blue",
        "Classic Black",
        "Pure White",
        "Teal",
        "Blue White",
        "Black Gold",
        "Silver Black",
        "Gold Black",
        "Black",
    )
]

STATUS_CHOICES = [
    ("pending", "Pending"),
    ("confirmed", "Confirmed"),
    ("shipped", "Shipped"),
    ("delivered", "Delivered"),
    ("out_of_stock", "Out of stock"),
]


def order_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid6.uuid7, editable=False, primary_key=True, serialize=False
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("full_name", models.CharField(max_length=100)),
        ("phone", models.CharField(max_length=20)),
        (
            "email",
            models.EmailField(blank=True, default=None, max_length=254, null=True),
        ),
        ("state", models.CharField(choices=STATE_CHOICES, max_length=32)),
        ("address", models.CharField(max_length=500)),
        ("product_name", models.CharField(max_length=200)),
        ("color", models.CharField(choices=COLOR_CHOICES, max_length=32)),
        (
            "quantity",
            models.PositiveSmallIntegerField(
                validators=[
                    django.core.validators.MinValueValidator(1),
                    django.core.validators.MaxValueValidator(100),
                ]
            ),
        ),
        ("price", models.DecimalField(decimal_places=2, max_digits=12)),
        ("total_price", models.DecimalField(decimal_places=2, max_digits=12)),
        (
            "discount",
            models.CharField(blank=True, default=None, max_length=50, null=True),
        ),
        (
            "discount_amount",
            models.DecimalField(
                blank=True, decimal_places=2, default=None, max_digits=12, null=True
            ),
        ),
        ("metadata", models.JSONField(blank=True, default=dict)),
        (
            "status",
            models.CharField(choices=STATUS_CHOICES, default="pending", max_length=20),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=order_fields(),
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["status"], name="orders_status_idx"),
                    models.Index(fields=["-created_at"], name="orders_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PreviewOrder",
            fields=order_fields(),
            options={
                "db_table": "test_orders",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(fields=["status"], name="test_orders_status_idx"),
                    models.Index(
                        fields=["-created_at"], name="test_orders_created_idx"
                    ),
                ],
            },
        ),
    ]
