"""
Triad Oracle - in-process stand-in for the randomness service.
"""

from triad.oracle.coordinator import FeeToken, RandomnessCoordinator

__all__ = ["FeeToken", "RandomnessCoordinator"]
