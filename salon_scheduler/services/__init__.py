"""Service package public API definitions.

The engine modules import ``salon_scheduler.services.exceptions``, and the
services in turn import the engine. Importing the service implementations
eagerly here would make every engine import drag in the store and the
services (and loop back into the engine half-initialised), so they are
imported lazily on first access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "BlockRuleService",
    "BookingService",
    "CommissionReportService",
    "WaitlistService",
]

_SERVICE_MODULES = {
    "BlockRuleService": "blocking",
    "BookingService": "booking",
    "CommissionReportService": "reports",
    "WaitlistService": "waitlist",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .blocking import BlockRuleService as BlockRuleService
    from .booking import BookingService as BookingService
    from .reports import CommissionReportService as CommissionReportService
    from .waitlist import WaitlistService as WaitlistService
