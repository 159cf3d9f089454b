"""Pure scheduling rules.

Nothing in this package touches the store: callers pass snapshots in and
persist whatever comes back.

The schemas import ``engine.time_utils`` for field validation, and the engine
modules import the schemas for their types. Importing the engine modules here
eagerly would therefore create a cycle, so the public names are resolved
lazily on first access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "PromotionResult",
    "commission",
    "enumerate_slots",
    "final_price",
    "find_conflict",
    "is_slot_available",
    "matching_rule",
    "promote_after_cancellation",
]

_ENGINE_MODULES = {
    "PromotionResult": "waitlist",
    "commission": "commission",
    "enumerate_slots": "availability",
    "final_price": "commission",
    "find_conflict": "availability",
    "is_slot_available": "availability",
    "matching_rule": "block_rules",
    "promote_after_cancellation": "waitlist",
}


def __getattr__(name: str) -> Any:
    if name not in _ENGINE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_ENGINE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .availability import enumerate_slots as enumerate_slots
    from .availability import find_conflict as find_conflict
    from .availability import is_slot_available as is_slot_available
    from .block_rules import matching_rule as matching_rule
    from .commission import commission as commission
    from .commission import final_price as final_price
    from .waitlist import PromotionResult as PromotionResult
    from .waitlist import promote_after_cancellation as promote_after_cancellation
