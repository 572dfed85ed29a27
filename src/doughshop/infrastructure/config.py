"""Runtime settings, read from the environment or a ``.env`` file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from decouple import config

from doughshop.domain.model.value_objects import Money

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str
    log_json: bool
    poll_interval: float
    payment_delay: float
    payment_timeout: float
    delivery_fee: Money
    reconcile_grace: float = 60.0


def load_settings() -> Settings:
    return Settings(
        data_dir=Path(config("DOUGHSHOP_DATA_DIR", default=str(_DEFAULT_DATA_DIR))),
        log_level=config("DOUGHSHOP_LOG_LEVEL", default="WARNING").upper(),
        log_json=config("DOUGHSHOP_LOG_JSON", default=False, cast=bool),
        poll_interval=config("DOUGHSHOP_POLL_INTERVAL", default=0.5, cast=float),
        payment_delay=config("DOUGHSHOP_PAYMENT_DELAY", default=2.0, cast=float),
        payment_timeout=config("DOUGHSHOP_PAYMENT_TIMEOUT", default=10.0, cast=float),
        delivery_fee=Money.of(config("DOUGHSHOP_DELIVERY_FEE", default="50.00")),
        reconcile_grace=config("DOUGHSHOP_RECONCILE_GRACE", default=60.0, cast=float),
    )
