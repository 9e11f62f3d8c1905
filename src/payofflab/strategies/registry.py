"""
Strategy registry setup for PayoffLab.
"""

from payofflab.core.kinds import PayoffMethod
from payofflab.core.registry import OrderingRegistry

from .avalanche import OrderingAvalanche
from .snowball import OrderingSnowball


def register_defaults():
    """
    Register all default ordering strategies in the global registry.

    Registered Strategies:
        - 'avalanche': Highest interest rate first
        - 'snowball': Smallest balance first

    Note:
        This function is automatically called when the module is imported.
        Additional strategies can be registered by assigning into
        ``OrderingRegistry`` directly.
    """
    OrderingRegistry[PayoffMethod.AVALANCHE] = OrderingAvalanche()
    OrderingRegistry[PayoffMethod.SNOWBALL] = OrderingSnowball()
