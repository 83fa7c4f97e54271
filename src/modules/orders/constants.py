"""Order domain constants.

Defines the lifecycle status choices, the closed enumerations accepted by
the intake validator (Nigerian states, product colours) and the storage
partition names used by tenant routing.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    OUT_OF_STOCK = "out_of_stock", "Out of stock"


# Storage partitions (table names) selected by the tenant router.
PRODUCTION_TABLE = "orders"
TEST_TABLE = "test_orders"

NIGERIAN_STATES: tuple[str, ...] = (
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

# Superset across every product landing page that posts to the intake.
PRODUCT_COLORS: tuple[str, ...] = (
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

MAX_QUANTITY = 100

# Markup / script-injection signatures rejected in free-text addresses.
ADDRESS_INJECTION_PATTERN = r"<script|javascript:|onerror="

NOT_RECORDED_MESSAGE = "Order received (database not configured)"
CREATED_MESSAGE = "Order created successfully"
STORAGE_FAILED_MESSAGE = (
    "We could not save your order. Please try again or contact us on WhatsApp."
)
