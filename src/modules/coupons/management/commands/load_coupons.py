from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from modules.core.context import RequestContext
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.services import CouponSeedService
from modules.coupons.tasks import load_coupons


class Command(BaseCommand):
    help = "Insert the valid coupon codes into the coupon registry."

    def add_arguments(self, parser):
        parser.add_argument("--data-dir", default=settings.COUPON_DATA_DIR)
        parser.add_argument(
            "--file",
            help="Valid-codes file (one code per line). Defaults to <data-dir>/valid/valid.",
        )
        parser.add_argument(
            "--async",
            action="store_true",
            dest="run_async",
            help="Queue the import as a Celery task instead of running it inline.",
        )

    def handle(self, *args, **options):
        service = CouponSeedService(
            repository=CouponDjangoRepository(),
            data_dir=Path(options["data_dir"]),
        )
        path = Path(options["file"]) if options["file"] else service.valid_codes_path
        if not path.is_file():
            raise CommandError(f"Valid-codes file not found: {path}")

        if options["run_async"]:
            result = load_coupons.delay(str(path))
            self.stdout.write(f"Queued coupon import task {result.id}")
            return

        inserted = service.load_valid_codes(RequestContext.background(), path)
        self.stdout.write(self.style.SUCCESS(f"{inserted} coupons inserted"))
