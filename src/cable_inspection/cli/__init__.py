"""Command line interface modules."""

from .analyze import main as analyze_main
from .summarize import main as summarize_main

__all__ = [
    "analyze_main",
    "summarize_main",
]
