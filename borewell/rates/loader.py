from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import structlog
import yaml
from pydantic import ValidationError

from borewell.core.settings import Settings, get_settings
from borewell.data_validators.slab_table import validate_slab_table
from borewell.domain.models import SlabRate
from borewell.rates.telescopic import default_rates
from borewell.schemas.rate_profile_v1 import rates_from_payload

logger = structlog.get_logger(__name__)


class RateTableError(ValueError):
    """Rate file missing, unreadable or structurally invalid."""


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    if suffix == ".json":
        return json.loads(text)
    raise RateTableError(f"unsupported rate file type: {path.name} (use .yaml, .yml or .json)")


def load_rate_table_file(path: Path) -> Tuple[SlabRate, ...]:
    """
    Accepts either

        version: 1
        rates:
          - {minDepth: 0, maxDepth: 300, rate: 85}

    or a bare list of slabs. Raises RateTableError on anything unusable.
    """
    path = Path(path)
    if not path.exists():
        raise RateTableError(f"rate file not found: {path}")

    try:
        raw = _read_document(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise RateTableError(f"rate file unreadable: {path}: {e}") from e

    items = raw.get("rates") if isinstance(raw, dict) else raw
    if not isinstance(items, list):
        raise RateTableError(f"rate file has no 'rates' list: {path}")

    try:
        rates = rates_from_payload(items)
    except ValidationError as e:
        raise RateTableError(f"rate file invalid: {path}: {e}") from e

    result = validate_slab_table(rates)
    if not result.ok:
        raise RateTableError(
            f"rate file invalid: {path}: " + "; ".join(e.message for e in result.errors)
        )
    for w in result.warnings:
        logger.warning(
            "rate_table_warning",
            path=str(path),
            code=w.warning_code,
            row=w.row_number,
            message=w.message,
        )

    return tuple(rates)


@dataclass(frozen=True)
class LoadedRates:
    rates: Tuple[SlabRate, ...]
    mtime_ns: int


class RateTableLoader:
    """
    Hot reload of an operator-edited rate file (thread-safe).

    - Keeps last known-good table active
    - On each get(): checks mtime_ns; if changed -> reload + validate
    - If reload fails: logs error and keeps old active table
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._loaded: Optional[LoadedRates] = None

        # eager initial load (fail-fast if missing)
        self._loaded = self._load_from_disk_or_raise()

    def get(self) -> Tuple[SlabRate, ...]:
        try:
            current_mtime = self._stat_mtime_ns()
        except FileNotFoundError:
            if self._loaded is None:
                raise
            logger.warning("rate_file_missing", path=str(self.path), keeping="previous")
            return self._loaded.rates

        loaded = self._loaded
        if loaded is not None and current_mtime == loaded.mtime_ns:
            return loaded.rates

        with self._lock:
            loaded = self._loaded
            # double-check after acquiring lock
            try:
                current_mtime = self._stat_mtime_ns()
            except FileNotFoundError:
                if loaded is None:
                    raise
                logger.warning("rate_file_missing", path=str(self.path), keeping="previous")
                return loaded.rates

            if loaded is not None and current_mtime == loaded.mtime_ns:
                return loaded.rates

            try:
                new_loaded = self._load_from_disk_or_raise(expected_mtime_ns=current_mtime)
            except RateTableError as e:
                if loaded is None:
                    raise
                logger.error("rate_table_reload_failed", path=str(self.path), error=str(e))
                return loaded.rates

            self._loaded = new_loaded
            logger.info(
                "rate_table_reloaded",
                path=str(self.path),
                slabs=len(new_loaded.rates),
                mtime_ns=new_loaded.mtime_ns,
            )
            return new_loaded.rates

    # -----------------
    # internals
    # -----------------

    def _stat_mtime_ns(self) -> int:
        return os.stat(self.path).st_mtime_ns

    def _load_from_disk_or_raise(self, expected_mtime_ns: Optional[int] = None) -> LoadedRates:
        if expected_mtime_ns is None:
            try:
                expected_mtime_ns = self._stat_mtime_ns()
            except FileNotFoundError as e:
                raise RateTableError(f"rate file not found: {self.path}") from e
        rates = load_rate_table_file(self.path)
        return LoadedRates(rates=rates, mtime_ns=expected_mtime_ns)


_loaders: Dict[Path, RateTableLoader] = {}
_loaders_lock = threading.Lock()


def get_loader(path: Path) -> RateTableLoader:
    key = Path(path).resolve()
    with _loaders_lock:
        loader = _loaders.get(key)
        if loader is None:
            loader = RateTableLoader(key)
            _loaders[key] = loader
        return loader


def active_rates(s: Optional[Settings] = None) -> List[SlabRate]:
    """Configured rate file if any, else the built-in telescopic table. Always a fresh list."""
    s = s or get_settings()
    if s.rates_file is None:
        return default_rates()
    return list(get_loader(s.rates_file).get())
