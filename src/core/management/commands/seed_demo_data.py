"""Seed demo customers, products and orders for local testing.

Orders go through ``sales.services.create_order`` so that totals, item
weights and stock levels are produced exactly as in production.
"""

from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

# (name, shop_name, phone, location, trust_score, total_debt, status)
DEMO_CUSTOMERS = [
    ("Sunita Devi", "Sunita Wholesale", "+91-9810000001", "Azadpur, Delhi", 30, "125000", "risk"),
    ("Priya Singh", "Singh Trading Co.", "+91-9810000002", "Okhla, Delhi", 45, "78000", "risk"),
    ("Ravi Verma", "Verma Enterprises", "+91-9810000003", "Ghaziabad, UP", 50, "45000", "active"),
    ("Neha Gupta", "Gupta Store", "+91-9810000004", "Noida, UP", 60, "30000", "vip"),
    ("Amit Sharma", "Sharma Fresh Mart", "+91-9810000005", "Gurugram, HR", 70, "15000", "vip"),
    ("Rahul Mehta", "Mehta Traders", "+91-9810000006", "Karol Bagh, Delhi", 85, "0", "active"),
    ("Kavita Rao", "Rao Provisions", "+91-9810000007", "Faridabad, HR", 90, "0", "active"),
]

# (name, price_per_bag, bag_weight_kg, stock_kg)
DEMO_PRODUCTS = [
    ("Potato (Frying)", "2500", "50", "25000"),
    ("Potato (Regular)", "2000", "50", "20000"),
    ("Onion (Red)", "1800", "50", "19000"),
    ("Onion (White)", "1600", "50", "15000"),
]


class Command(BaseCommand):
    help = "Seed demo customers, products and orders for the dashboard and invoices."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing orders, customers and products first.",
        )
        parser.add_argument(
            "--days",
            type=int,
            default=14,
            help="How many past days to spread demo orders across (default: 14).",
        )
        parser.add_argument(
            "--orders",
            type=int,
            default=40,
            help="How many orders to generate (default: 40).",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=42,
            help="Random seed for reproducible demo generation (default: 42).",
        )

    def handle(self, *args, **options):
        from api.wiring import get_store
        from catalog.models import Product
        from customers.models import Customer
        from sales.models import Order, PaymentType
        from sales.services import create_order

        random.seed(int(options["seed"]))

        if options["reset"]:
            self.stdout.write("Removing existing orders, customers and products...")
            with transaction.atomic():
                Order.objects.all().delete()
                Customer.objects.all().delete()
                Product.objects.all().delete()

        for name, shop, phone, location, trust, debt, status in DEMO_CUSTOMERS:
            Customer.objects.get_or_create(
                phone=phone,
                defaults={
                    "name": name,
                    "shop_name": shop,
                    "location_geo": location,
                    "trust_score": trust,
                    "total_debt": Decimal(debt),
                    "status": status,
                },
            )

        for name, price, weight, stock in DEMO_PRODUCTS:
            Product.objects.get_or_create(
                name=name,
                defaults={
                    "price_per_bag": Decimal(price),
                    "bag_weight_kg": Decimal(weight),
                    "stock_kg": Decimal(stock),
                },
            )

        customers = list(Customer.objects.order_by("created_at"))
        products = list(Product.objects.order_by("name"))
        store = get_store()
        today = timezone.localdate()
        days = max(int(options["days"]), 1)

        self.stdout.write(f"Generating {int(options['orders'])} orders across {days} days...")
        for _ in range(int(options["orders"])):
            picked = random.sample(products, k=random.randint(1, min(3, len(products))))
            create_order(
                store,
                customer_id=random.choice(customers).pk,
                payment_type=random.choice([PaymentType.CASH, PaymentType.CREDIT]),
                items=[(product.pk, random.randint(1, 12)) for product in picked],
                order_date=today - timedelta(days=random.randint(0, days - 1)),
            )

        self.stdout.write(self.style.SUCCESS(
            f"Demo data ready: {len(customers)} customers, {len(products)} products, "
            f"{Order.objects.count()} orders."
        ))
