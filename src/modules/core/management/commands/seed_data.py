from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.coupons.models import Coupon
from modules.products.models import Product

CATALOG = [
    ("Waffle", "Waffle with Berries", Decimal("6.50")),
    ("Crème Brûlée", "Vanilla Bean Crème Brûlée", Decimal("7.00")),
    ("Macaron", "Macaron Mix of Five", Decimal("8.00")),
    ("Tiramisu", "Classic Tiramisu", Decimal("5.50")),
    ("Baklava", "Pistachio Baklava", Decimal("4.00")),
    ("Pie", "Lemon Meringue Pie", Decimal("5.00")),
    ("Cake", "Red Velvet Cake", Decimal("4.50")),
    ("Brownie", "Salted Caramel Brownie", Decimal("4.50")),
    ("Panna Cotta", "Vanilla Panna Cotta", Decimal("6.50")),
]

COUPONS = ["HAPPYHOURS", "BUYGETONE", "FIFTYOFF1"]


class Command(BaseCommand):
    help = "Seed database with a demo catalog and coupons."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        with transaction.atomic():
            products = self._seed_products()
            coupons = self._seed_coupons()

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={products}, coupons={coupons}"
            )
        )

    def _seed_products(self) -> int:
        created = 0
        for category, name, price in CATALOG:
            _, was_created = Product.objects.get_or_create(
                name=name,
                defaults={"category": category, "price": price},
            )
            created += was_created
        return created

    def _seed_coupons(self) -> int:
        created = 0
        for code in COUPONS:
            _, was_created = Coupon.objects.get_or_create(code=code)
            created += was_created
        return created
