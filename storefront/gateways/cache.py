"""
Product Cache - Local persistence of the product list.

The cache:
- Stores products as JSON records keyed by product id
- Upserts on write, keeping any extra keys already stored
- Returns products in the order they were first stored
- Reports failures as STORAGE errors, never raises

The engine treats every cache failure as non-fatal: reads fall back
to an empty list, writes are logged and dropped.
"""

from __future__ import annotations
import json
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import structlog

from ..domain.models import Product
from ..result import Err, Ok, Result
from .errors import GatewayError
from .records import decode_products, encode_product

logger = structlog.get_logger(__name__)

DATE_ADDED_KEY = "date_added"


class CacheGateway(ABC):
    """Local product store."""

    @abstractmethod
    async def read_all(self) -> Result[list[Product], GatewayError]:
        """Every stored product, oldest first."""

    @abstractmethod
    async def write_all(self, products: list[Product]) -> Result[None, GatewayError]:
        """Upsert products by id."""

    @abstractmethod
    async def get_one(self, product_id: int) -> Result[Product | None, GatewayError]:
        """One stored product, or None."""

    @abstractmethod
    async def delete_one(self, product_id: int) -> Result[None, GatewayError]:
        """Remove one product if present."""

    @abstractmethod
    async def clear(self) -> Result[None, GatewayError]:
        """Remove every product."""


def merge_records(
    stored: dict[int, dict[str, Any]],
    products: list[Product],
    now: float | None = None,
) -> dict[int, dict[str, Any]]:
    """
    Upsert products into stored records.

    Product fields are overwritten; every other stored key survives.
    New records get a date_added timestamp.
    """
    now = time.time() if now is None else now
    merged = {pid: dict(record) for pid, record in stored.items()}
    for product in products:
        fields = encode_product(product)
        if product.id in merged:
            merged[product.id].update(fields)
        else:
            merged[product.id] = {**fields, DATE_ADDED_KEY: now}
    return merged


def ordered_records(records: dict[int, dict[str, Any]]) -> list[dict[str, Any]]:
    """Records sorted by date_added; insertion order breaks ties."""
    return sorted(records.values(), key=lambda r: r.get(DATE_ADDED_KEY, 0.0))


class InMemoryCacheGateway(CacheGateway):
    """Cache held in a dict. Lost when the process exits."""

    def __init__(self):
        self._records: dict[int, dict[str, Any]] = {}

    @property
    def records(self) -> dict[int, dict[str, Any]]:
        return self._records

    async def read_all(self) -> Result[list[Product], GatewayError]:
        return decode_products(ordered_records(self._records))

    async def write_all(self, products: list[Product]) -> Result[None, GatewayError]:
        self._records = merge_records(self._records, products)
        return Ok(None)

    async def get_one(self, product_id: int) -> Result[Product | None, GatewayError]:
        record = self._records.get(product_id)
        if record is None:
            return Ok(None)
        decoded = decode_products([record])
        if isinstance(decoded, Err):
            return decoded
        return Ok(decoded.value[0])

    async def delete_one(self, product_id: int) -> Result[None, GatewayError]:
        self._records.pop(product_id, None)
        return Ok(None)

    async def clear(self) -> Result[None, GatewayError]:
        self._records.clear()
        return Ok(None)


class JSONFileCacheGateway(CacheGateway):
    """
    File-based cache.

    Usage:
        cache = JSONFileCacheGateway(cache_dir="~/.storefront/cache")
        await cache.write_all(products)
        result = await cache.read_all()

    All records live in a single products.json file. The whole file is
    rewritten on every change; last write wins.
    """

    FILENAME = "products.json"

    def __init__(self, cache_dir: str | Path | None = None):
        if cache_dir is None:
            cache_dir = Path.home() / ".storefront" / "cache"
        self.cache_dir = Path(cache_dir).expanduser()
        self.path = self.cache_dir / self.FILENAME

    async def read_all(self) -> Result[list[Product], GatewayError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        decoded = decode_products(ordered_records(loaded.value))
        if isinstance(decoded, Err):
            return Err(GatewayError.storage(str(decoded.error)))
        return decoded

    async def write_all(self, products: list[Product]) -> Result[None, GatewayError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        return self._save(merge_records(loaded.value, products))

    async def get_one(self, product_id: int) -> Result[Product | None, GatewayError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        record = loaded.value.get(product_id)
        if record is None:
            return Ok(None)
        decoded = decode_products([record])
        if isinstance(decoded, Err):
            return Err(GatewayError.storage(str(decoded.error)))
        return Ok(decoded.value[0])

    async def delete_one(self, product_id: int) -> Result[None, GatewayError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        records = loaded.value
        if records.pop(product_id, None) is None:
            return Ok(None)
        return self._save(records)

    async def clear(self) -> Result[None, GatewayError]:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            return Err(GatewayError.storage(str(e)))
        return Ok(None)

    def _load(self) -> Result[dict[int, dict[str, Any]], GatewayError]:
        if not self.path.exists():
            return Ok({})
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Ok({int(record["id"]): record for record in data["products"]})
        except (OSError, ValueError, KeyError, TypeError) as e:
            return Err(GatewayError.storage(f"unreadable cache file {self.path}: {e}"))

    def _save(self, records: dict[int, dict[str, Any]]) -> Result[None, GatewayError]:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({"products": ordered_records(records)}, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            return Err(GatewayError.storage(str(e)))
        return Ok(None)
