"""
Ordering strategy implementations for PayoffLab.

Each strategy ranks the active debts once at the start of a run. The module
registers the defaults on import, making them available to the simulator
by ``PayoffMethod``.
"""

from .avalanche import OrderingAvalanche
from .registry import register_defaults
from .snowball import OrderingSnowball

# Register all default strategies when module is imported
register_defaults()

__all__ = [
    "OrderingAvalanche",
    "OrderingSnowball",
    "register_defaults",
]
