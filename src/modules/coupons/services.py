"""Coupon seed pipeline (Use Cases).

Feeds the coupon registry from flat source files in three steps, each
exposed as a management command:

1. ``download_sources``: fetch the gzip-compressed sources over HTTP and
   store them decompressed under the data directory.  Sources download
   concurrently; a failing source is logged and skipped.
2. ``select_valid_codes``: a code is valid when its trimmed length is
   between 8 and 10 characters and it appears in at least two different
   source files.
3. ``load_valid_codes``: insert the selected codes into the registry,
   skipping codes already present.
"""

from __future__ import annotations

import gzip
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

import requests
import structlog

if TYPE_CHECKING:
    from modules.core.context import RequestContext
    from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)

VALID_CODE_MIN_LENGTH = 8
VALID_CODE_MAX_LENGTH = 10
MIN_SOURCE_OCCURRENCES = 2
DOWNLOAD_TIMEOUT_SECONDS = 60
COPY_CHUNK_SIZE = 1 << 20


def parse_sources(entries: Iterable[str]) -> Dict[str, str]:
    """Turn ``name=url`` entries into a mapping.

    Raises:
        ValueError: for an entry without a name or URL.
    """
    sources: Dict[str, str] = {}
    for entry in entries:
        name, sep, url = entry.strip().partition("=")
        if not sep or not name.strip() or not url.strip():
            raise ValueError(f"Invalid coupon source {entry!r}: expected name=url.")
        sources[name.strip()] = url.strip()
    return sources


def is_candidate_code(code: str) -> bool:
    return VALID_CODE_MIN_LENGTH <= len(code) <= VALID_CODE_MAX_LENGTH


class CouponSeedService:
    """Application service for the coupon seed pipeline.

    Receives an ``ICouponRepository`` via constructor injection (DIP).  The
    HTTP session is injectable so downloads can be exercised without the
    network.
    """

    def __init__(
        self,
        repository: ICouponRepository,
        data_dir: Path,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._repo = repository
        self._data_dir = Path(data_dir)
        self._session = session or requests.Session()

    @property
    def valid_codes_path(self) -> Path:
        return self._data_dir / "valid" / "valid"

    def source_path(self, name: str) -> Path:
        return self._data_dir / name

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download_sources(self, sources: Mapping[str, str]) -> Dict[str, Path]:
        """Download every source concurrently.

        Returns the paths of the sources that were stored successfully.
        """
        self._data_dir.mkdir(parents=True, exist_ok=True)
        downloaded: Dict[str, Path] = {}
        if not sources:
            return downloaded

        with ThreadPoolExecutor(max_workers=len(sources)) as pool:
            futures = {
                pool.submit(self._download, name, url): name
                for name, url in sources.items()
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    downloaded[name] = future.result()
                except (requests.RequestException, OSError, EOFError) as exc:
                    logger.error("coupon.download_failed", source=name, error=str(exc))

        logger.info(
            "coupon.download_finished",
            requested=len(sources),
            downloaded=len(downloaded),
        )
        return downloaded

    def _download(self, name: str, url: str) -> Path:
        target = self.source_path(name)
        logger.info("coupon.download_started", source=name, url=url)

        response = self._session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS)
        try:
            response.raise_for_status()
            try:
                with gzip.GzipFile(fileobj=response.raw) as archive, target.open("wb") as out:
                    shutil.copyfileobj(archive, out, COPY_CHUNK_SIZE)
            except BaseException:
                # A partial file would be scanned as a complete source later
                target.unlink(missing_ok=True)
                raise
        finally:
            response.close()

        logger.info("coupon.download_stored", source=name, path=str(target))
        return target

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_valid_codes(self, paths: Sequence[Path]) -> List[str]:
        """Return the sorted codes present in at least two of *paths*."""
        seen: Dict[str, int] = {}
        for index, path in enumerate(paths):
            bit = 1 << index
            log = logger.bind(path=str(path))
            log.info("coupon.scan_started")
            with Path(path).open("r", encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    code = line.strip()
                    if is_candidate_code(code):
                        seen[code] = seen.get(code, 0) | bit
            log.info("coupon.scan_finished", distinct_codes=len(seen))

        return sorted(
            code
            for code, mask in seen.items()
            if bin(mask).count("1") >= MIN_SOURCE_OCCURRENCES
        )

    def write_valid_codes(self, codes: Iterable[str]) -> Path:
        target = self.valid_codes_path
        target.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with target.open("w", encoding="utf-8") as out:
            for code in codes:
                out.write(f"{code}\n")
                count += 1
        logger.info("coupon.valid_codes_written", path=str(target), count=count)
        return target

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load_valid_codes(self, ctx: RequestContext, path: Optional[Path] = None) -> int:
        """Insert the codes listed in *path* (one per line) into the registry.

        Returns the number of coupons added.
        """
        source = Path(path) if path is not None else self.valid_codes_path
        with source.open("r", encoding="utf-8") as handle:
            codes = [line.strip() for line in handle if line.strip()]

        inserted = self._repo.insert_coupons(ctx, codes)
        logger.info(
            "coupon.import_finished",
            path=str(source),
            read=len(codes),
            inserted=inserted,
        )
        return inserted
