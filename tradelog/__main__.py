"""Entry point for running tradelog as a module.

Usage:
    python -m tradelog [command] [options]

Commands:
    add / edit / delete   Manage trades
    list                  Show the trade log
    stats                 Dashboard statistics
    equity                Equity curve
    strategies / symbols  PNL breakdowns
    calendar              Daily PNL for a month
    export                CSV / Parquet / JSON / Excel export
    coach                 AI trading coach
    role / reset          Access gate and admin reset

Examples:
    python -m tradelog add --symbol TSLA --side LONG --entry-price 100 --exit-price 110 --qty 10
    python -m tradelog stats
    python -m tradelog export -f csv,xlsx
"""

import sys

from tradelog.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
