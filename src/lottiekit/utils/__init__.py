"""Utility modules for lottiekit."""

from .performance import MeanCalculator, PerformanceTracker

__all__ = [
    "MeanCalculator",
    "PerformanceTracker",
]
