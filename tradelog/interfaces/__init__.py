"""Interfaces Layer: Presentation and input boundary.

This layer contains:
- forms.py: Raw input -> validated Trade
- cli.py: Command-line interface
"""

from tradelog.interfaces.cli import main as cli_main
from tradelog.interfaces.forms import TradeFormError, build_trade

__all__ = ["cli_main", "TradeFormError", "build_trade"]
