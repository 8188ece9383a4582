"""Coach Service: Narrative journal critique with a safe fallback.

Wraps the insight requester so that its failures stay contained:
- Fewer than min_insight_trades trades: no request is made
- Requester raises InsightError: the fallback message is returned

The trade collection and the metrics are never touched here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from tradelog.domain import Trade, compute_realized_pnl
from tradelog.infrastructure import DEFAULT_CONFIG, InsightError, JournalConfig

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "An error occurred while analyzing your trades. "
    "Please check your network or API configuration."
)
NOT_ENOUGH_TRADES_MESSAGE = "Please log at least {n} trades for a meaningful analysis."


class InsightRequester(Protocol):
    async def analyze_journal(self, summaries: Sequence[dict[str, Any]]) -> str: ...


@dataclass(frozen=True, slots=True)
class CoachReport:
    """Outcome of a coaching request.

    Attributes:
        text: Markdown analysis, or a user-facing explanation when not ok
        ok: True if the text came from the model
        trade_count: Number of trades the analysis was based on
    """
    text: str
    ok: bool
    trade_count: int


def summarize_trades(trades: Sequence[Trade]) -> list[dict[str, Any]]:
    """Reduce trades to the fields the coach needs.

    Open trades are included with pnl None so the model sees them as open.
    """
    return [
        {
            "symbol": t.symbol,
            "side": t.side,
            "pnl": compute_realized_pnl(t) if t.is_closed else None,
            "strategy": t.strategy,
            "notes": t.notes,
            "date": t.entry_date,
        }
        for t in trades
    ]


class CoachService:
    """Runs the trading coach.

    Example:
        >>> coach = CoachService(GeminiInsightRequester())
        >>> report = asyncio.run(coach.analyze(store.trades))
        >>> print(report.text)
    """

    def __init__(self, requester: InsightRequester, config: JournalConfig = DEFAULT_CONFIG):
        self._requester = requester
        self._config = config

    def can_analyze(self, trades: Sequence[Trade]) -> bool:
        return len(trades) >= self._config.min_insight_trades

    async def analyze(self, trades: Sequence[Trade]) -> CoachReport:
        """Request a critique of the journal.

        Never raises for requester failures; check CoachReport.ok instead.
        """
        n = len(trades)
        if not self.can_analyze(trades):
            return CoachReport(
                text=NOT_ENOUGH_TRADES_MESSAGE.format(n=self._config.min_insight_trades),
                ok=False,
                trade_count=n,
            )

        try:
            text = await self._requester.analyze_journal(summarize_trades(trades))
        except InsightError as e:
            logger.warning("insight request failed: %s", e)
            return CoachReport(text=FALLBACK_MESSAGE, ok=False, trade_count=n)

        return CoachReport(text=text, ok=True, trade_count=n)
