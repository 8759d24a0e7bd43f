from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.services import CouponSeedService, parse_sources


class Command(BaseCommand):
    help = (
        "Select coupon codes of 8-10 characters present in at least two "
        "source files and write them to <data-dir>/valid/valid."
    )

    def add_arguments(self, parser):
        parser.add_argument("--data-dir", default=settings.COUPON_DATA_DIR)
        parser.add_argument(
            "files",
            nargs="*",
            help="Source files to scan. Defaults to the configured sources.",
        )

    def handle(self, *args, **options):
        service = CouponSeedService(
            repository=CouponDjangoRepository(),
            data_dir=Path(options["data_dir"]),
        )
        if options["files"]:
            paths = [Path(f) for f in options["files"]]
        else:
            names = parse_sources(settings.COUPON_SOURCE_URLS)
            paths = [service.source_path(name) for name in names]

        absent = [str(p) for p in paths if not p.is_file()]
        if absent:
            raise CommandError(f"Source files not found: {', '.join(absent)}")

        codes = service.select_valid_codes(paths)
        target = service.write_valid_codes(codes)
        self.stdout.write(
            self.style.SUCCESS(f"{len(codes)} valid coupons written to {target}")
        )
