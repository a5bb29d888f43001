"""Financial summary command."""

import logging
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from ..router.intent import FinanceQueryParams
from ..storage.errors import StoreError
from ..storage.models import PersonDTO, PlacementDTO
from .base import CommandContext
from .formatting import format_amount

logger = logging.getLogger(__name__)

NO_DATA = "No financial data available."


@dataclass
class FinancialSummary:
    """Figures shown in the financial summary."""

    paf_revenue: float
    active_clients: int
    won_clients: int
    month_fees: float
    month_placements: int
    total_fees: float
    total_placements: int
    refunds: float
    refund_count: int

    @property
    def net_revenue(self) -> float:
        return self.paf_revenue + self.total_fees - self.refunds


def summarize(
    clients: list[PersonDTO],
    placements: list[PlacementDTO],
    paf_fee: float,
    active_status: str,
    won_status: str,
    now: datetime,
    timezone: ZoneInfo,
) -> FinancialSummary:
    """Aggregate client statuses and placement fees.

    A negative placement fee is a refund and only counts against the refunds.

    Args:
        clients: Every client row.
        placements: Every converted-client row.
        paf_fee: Fee counted once per active client.
        active_status: Status of clients who have paid the fee.
        won_status: Status of won clients.
        now: Current instant, which fixes "this month".
        timezone: Display timezone defining the calendar month.

    Returns:
        The aggregated figures.
    """
    local_now = now.astimezone(timezone)
    active = sum(1 for client in clients if client.status == active_status)
    won = sum(1 for client in clients if client.status == won_status)

    this_month = [
        p
        for p in placements
        if p.placed_at is not None
        and (p.placed_at.astimezone(timezone).year, p.placed_at.astimezone(timezone).month)
        == (local_now.year, local_now.month)
    ]
    refunds = [p for p in placements if p.is_refund]

    return FinancialSummary(
        paf_revenue=active * paf_fee,
        active_clients=active,
        won_clients=won,
        month_fees=sum(max(p.placement_fee, 0) for p in this_month),
        month_placements=len(this_month),
        total_fees=sum(max(p.placement_fee, 0) for p in placements),
        total_placements=len(placements),
        refunds=sum(p.refund_value for p in refunds),
        refund_count=len(refunds),
    )


class FinanceCommandHandler:
    """Answers finance, revenue and income questions from stored figures."""

    def __init__(self, context: CommandContext) -> None:
        self._ctx = context

    def summary(self, params: FinanceQueryParams, user_id: str) -> str:
        """Build the financial summary.

        Args:
            params: Unused; the query carries no parameters.
            user_id: Acting staff member.

        Returns:
            Reply text.
        """
        finance = self._ctx.config.finance
        try:
            clients = self._ctx.store.clients.find_all()
            placements = self._ctx.store.placements.find_all()
        except StoreError as e:
            logger.error("Failed to get financial data: %s", e)
            return f"Failed to get financial data: {e}"

        if not clients and not placements:
            return NO_DATA

        figures = summarize(
            clients,
            placements,
            finance.paf_fee,
            finance.active_status,
            finance.won_status,
            self._ctx.now(),
            self._ctx.timezone,
        )
        return self._render(figures)

    def _render(self, figures: FinancialSummary) -> str:
        currency = self._ctx.config.display.currency

        def amount(value: float) -> str:
            return format_amount(value, currency)

        lines = [
            "💰 FINANCIAL ANALYSIS:",
            "",
            "📅 THIS MONTH:",
            f"{amount(figures.month_fees)} ({figures.month_placements} placements)",
            "",
            "📊 REVENUE BREAKDOWN:",
            f"• PAF Fees: {amount(figures.paf_revenue)} ({figures.active_clients} active clients)",
            f"• Placement Fees: {amount(figures.total_fees)} "
            f"({figures.total_placements} placements)",
            f"• Refunds: -{amount(figures.refunds)} ({figures.refund_count} refunds)",
            "",
            f"💵 NET REVENUE: {amount(figures.net_revenue)}",
            "",
            "🎯 CLIENT STATUS:",
            f"• Active (Paid PAF): {figures.active_clients}",
            f"• Won: {figures.won_clients}",
            f"• Total Placements: {figures.total_placements}",
        ]
        return "\n".join(lines)


__all__ = ["NO_DATA", "FinanceCommandHandler", "FinancialSummary", "summarize"]
