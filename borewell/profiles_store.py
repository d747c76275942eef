from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional

import structlog

from borewell.core.settings import get_settings
from borewell.domain.models import SlabRate
from borewell.schemas.rate_profile_v1 import RateProfileV1, rates_to_payload

logger = structlog.get_logger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def profiles_path() -> Path:
    return Path(get_settings().profiles_file)


@dataclass(frozen=True)
class RateProfile:
    name: str
    rates: List[SlabRate] = field(default_factory=list)
    updated_at: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "rates": rates_to_payload(self.rates),
            "updatedAt": self.updated_at,
        }


def load_profiles(path: Optional[Path] = None) -> list[RateProfile]:
    p = path or profiles_path()
    if not p.exists():
        return []
    data = json.loads(p.read_text(encoding="utf-8"))
    # older files were a bare list of {name, rates}
    items = data.get("profiles", []) if isinstance(data, dict) else data
    out: list[RateProfile] = []
    for it in items:
        parsed = RateProfileV1.model_validate(it)
        out.append(
            RateProfile(
                name=parsed.name,
                rates=parsed.to_domain(),
                updated_at=it.get("updatedAt") if isinstance(it, dict) else None,
            )
        )
    return out


def save_profiles(profiles: list[RateProfile], path: Optional[Path] = None) -> None:
    p = path or profiles_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    payload: dict[str, Any] = {
        "version": 1,
        "profiles": [x.to_payload() for x in profiles],
    }
    p.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def get_profile(name: str, path: Optional[Path] = None) -> Optional[RateProfile]:
    name = (name or "").strip()
    return next((x for x in load_profiles(path) if x.name == name), None)


def upsert_profile(
    *,
    name: str,
    rates: Iterable[SlabRate],
    path: Optional[Path] = None,
) -> tuple[list[RateProfile], RateProfile | None, RateProfile]:
    """
    Create or overwrite a named profile.
    Returns (all profiles, previous version or None, stored version).
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("profile name is required")

    profiles = load_profiles(path)
    existing = next((x for x in profiles if x.name == name), None)

    updated = RateProfile(name=name, rates=list(rates), updated_at=_utc_now_iso())

    # keep insertion order; overwrite in place
    new_list: list[RateProfile] = []
    replaced = False
    for x in profiles:
        if x.name == name:
            new_list.append(updated)
            replaced = True
        else:
            new_list.append(x)
    if not replaced:
        new_list.append(updated)

    save_profiles(new_list, path)
    logger.info(
        "rate_profile_saved",
        profile=name,
        slabs=len(updated.rates),
        overwritten=existing is not None,
    )
    return new_list, existing, updated


def delete_profile(
    name: str, path: Optional[Path] = None
) -> tuple[list[RateProfile], RateProfile | None]:
    name = (name or "").strip()
    profiles = load_profiles(path)
    existing = next((x for x in profiles if x.name == name), None)
    if existing is None:
        return profiles, None
    new_list = [x for x in profiles if x.name != name]
    save_profiles(new_list, path)
    logger.info("rate_profile_deleted", profile=name)
    return new_list, existing


def profile_names(path: Optional[Path] = None) -> list[str]:
    return [x.name for x in load_profiles(path)]
