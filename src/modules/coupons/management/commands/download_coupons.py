from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.services import CouponSeedService, parse_sources


class Command(BaseCommand):
    help = "Download the gzip coupon sources into the coupon data directory."

    def add_arguments(self, parser):
        parser.add_argument(
            "--data-dir",
            default=settings.COUPON_DATA_DIR,
            help="Directory receiving the decompressed sources.",
        )
        parser.add_argument(
            "--source",
            action="append",
            dest="sources",
            metavar="NAME=URL",
            help="Source to download (repeatable). Defaults to COUPON_SOURCE_URLS.",
        )

    def handle(self, *args, **options):
        try:
            sources = parse_sources(options["sources"] or settings.COUPON_SOURCE_URLS)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        service = CouponSeedService(
            repository=CouponDjangoRepository(),
            data_dir=Path(options["data_dir"]),
        )
        downloaded = service.download_sources(sources)

        for name in sorted(downloaded):
            self.stdout.write(f"{name} -> {downloaded[name]}")
        failed = sorted(set(sources) - set(downloaded))
        if failed:
            raise CommandError(f"Failed to download: {', '.join(failed)}")
        self.stdout.write(self.style.SUCCESS(f"Downloaded {len(downloaded)} sources."))
