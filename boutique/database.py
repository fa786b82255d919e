# boutique/database.py
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core import _clean_record, _make_product_dict, _merge_product, _new_product_id
from .errors import NotFound, PersistenceError

logger = logging.getLogger(__name__)

# The catalog is one ordered list of product dicts. Every operation loads the
# whole list, changes it in memory and saves the whole list back. Mutations
# hold the store's lock for the full cycle so writers in this process never
# overwrite each other.


class ProductStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()

    # subclasses provide the document I/O
    def _load(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def _save(self, products: List[Dict[str, Any]]) -> None:
        raise NotImplementedError

    def list(self) -> List[Dict[str, Any]]:
        return self._load()

    def create(self, name: Any, description: Any, price: Any = None,
               category: Any = None) -> Dict[str, Any]:
        with self._lock:
            products = self._load()
            pid = _new_product_id(p.get("id") for p in products)
            product = _make_product_dict(pid, name, description, price, category)
            products.append(product)
            self._save(products)
        logger.info("created product %s (%s)", product["id"], product["name"])
        return product

    def update(self, product_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            products = self._load()
            index = _find(products, product_id)
            updated = _merge_product(products[index], changes)
            products[index] = updated
            self._save(products)
        logger.info("updated product %s", product_id)
        return updated

    def delete(self, product_id: str) -> Dict[str, Any]:
        with self._lock:
            products = self._load()
            index = _find(products, product_id)
            removed = products.pop(index)
            self._save(products)
        logger.info("deleted product %s", product_id)
        return removed


def _find(products: List[Dict[str, Any]], product_id: str) -> int:
    for i, p in enumerate(products):
        if p.get("id") == product_id:
            return i
    raise NotFound("Product not found.")


class JsonFileProductStore(ProductStore):
    """Products kept in a single pretty-printed JSON array on disk."""

    def __init__(self, path: os.PathLike) -> None:
        super().__init__()
        self.path = Path(path)

    def _load(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.warning("could not read %s, returning empty list: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a JSON array, returning empty list", self.path)
            return []
        products = []
        for entry in data:
            product = _clean_record(entry)
            if product is None:
                logger.warning("skipping malformed product entry in %s: %r", self.path, entry)
                continue
            products.append(product)
        return products

    def _save(self, products: List[Dict[str, Any]]) -> None:
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(products, fh, indent=2)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("failed to write %s: %s", self.path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError() from exc


class MemoryProductStore(ProductStore):
    """In-process store with the same semantics, for tests and demos."""

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__()
        self._products: List[Dict[str, Any]] = [dict(p) for p in products or []]

    def _load(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self._products]

    def _save(self, products: List[Dict[str, Any]]) -> None:
        self._products = [dict(p) for p in products]
