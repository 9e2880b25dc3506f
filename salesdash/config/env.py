from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Tuple

DEFAULT_SALES_REPS = ("Shaun", "Candice", "Richard", "Clare")


@dataclass(frozen=True)
class StoreConfig:
    events_path: str


def get_store_config() -> StoreConfig:
    return StoreConfig(events_path=os.getenv("SALESDASH_EVENTS_PATH", "./data/events.json"))


@dataclass(frozen=True)
class TargetConfig:
    monthly_target: float = 7_500_000.0
    dashboard_target: float = 6_500_000.0


def get_target_config() -> TargetConfig:
    return TargetConfig(
        monthly_target=float(os.getenv("SALESDASH_MONTHLY_TARGET", "7500000")),
        dashboard_target=float(os.getenv("SALESDASH_DASHBOARD_TARGET", "6500000")),
    )


@dataclass(frozen=True)
class RosterConfig:
    sales_reps: Tuple[str, ...] = DEFAULT_SALES_REPS


def get_roster_config() -> RosterConfig:
    raw = os.getenv("SALESDASH_SALES_REPS")
    if raw is None:
        return RosterConfig()
    reps = tuple(r.strip() for r in raw.split(",") if r.strip())
    return RosterConfig(sales_reps=reps)


@dataclass(frozen=True)
class RefreshConfig:
    # how often renderers should re-fetch; the aggregator never polls
    interval_sec: int = 300


def get_refresh_config() -> RefreshConfig:
    return RefreshConfig(interval_sec=int(os.getenv("SALESDASH_REFRESH_SEC", "300")))


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    log_dir: str | None = None


def get_log_config() -> LogConfig:
    return LogConfig(
        level=os.getenv("SALESDASH_LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("SALESDASH_LOG_DIR") or None,
    )
