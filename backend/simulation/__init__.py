"""
Tic-Tac-Toe AI Simulation Package

This package provides tools for running engine-vs-engine games between
difficulty levels and summarizing the outcomes.
"""

from .game_runner import GameRunner
from .analysis import summarize_results

__all__ = ["GameRunner", "summarize_results"]
