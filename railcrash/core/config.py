from __future__ import annotations
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env early (no error if missing)
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DetectorConfig:
    # 'branch' | 'station' | 'both'
    policy: str = field(default_factory=lambda: os.getenv("RAILCRASH_POLICY", "branch").lower())
    # every station needs an outgoing and an incoming branch
    strict_stations: bool = field(default_factory=lambda: _env_flag("RAILCRASH_STRICT_STATIONS"))
    # single-station routes take part in station-policy detection
    include_trivial_routes: bool = field(default_factory=lambda: _env_flag("RAILCRASH_INCLUDE_TRIVIAL_ROUTES"))
    audit_file: str | None = field(default_factory=lambda: os.getenv("RAILCRASH_AUDIT_FILE"))

    @property
    def is_audit_enabled(self) -> bool:
        return bool(self.audit_file)
