import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from finboard.aggregates import (
    balance,
    breakdown_by_category,
    bucketing_for,
    cumulative_series,
    evolution_series,
    last_transactions,
    summary_series,
    total_expenses,
    total_incomes,
)
from finboard.config import settings
from finboard.controller import DashboardContext
from finboard.domain import Kind
from finboard.periods import Instant

logger = logging.getLogger(__name__)

Widget = Callable[[DashboardContext, Instant], Dict[str, Any]]


def totals_widget(ctx: DashboardContext, now: Instant) -> Dict[str, Any]:
    trans = ctx.filtered_transactions
    return {
        "balance": balance(trans),
        "expenses": total_expenses(trans),
        "incomes": total_incomes(trans),
    }


def breakdown_widget(ctx: DashboardContext, now: Instant) -> Dict[str, Any]:
    trans = ctx.filtered_transactions
    return {
        "expenses_by_category": breakdown_by_category(trans, Kind.EXPENSE),
        "incomes_by_category": breakdown_by_category(trans, Kind.INCOME),
    }


def evolution_widget(ctx: DashboardContext, now: Instant) -> Dict[str, Any]:
    trans = ctx.filtered_transactions
    bucketing = bucketing_for(ctx.selected, now)
    return {
        "granularity": bucketing.granularity,
        "summary": summary_series(trans, bucketing),
        "expenses_series": evolution_series(trans, Kind.EXPENSE, bucketing),
        "incomes_series": evolution_series(trans, Kind.INCOME, bucketing),
        "expenses_cumulative": cumulative_series(trans, Kind.EXPENSE, bucketing),
        "incomes_cumulative": cumulative_series(trans, Kind.INCOME, bucketing),
    }


def last_transactions_widget(ctx: DashboardContext, now: Instant) -> Dict[str, Any]:
    limit = settings.LAST_TRANSACTIONS_LIMIT
    return {"last_transactions": tuple(last_transactions(ctx.filtered_transactions, limit))}


DEFAULT_WIDGETS: Tuple[Widget, ...] = (
    totals_widget,
    breakdown_widget,
    evolution_widget,
    last_transactions_widget,
)


class WidgetService:
    """Runs the dashboard widgets over a context and collects their outputs.

    widgets: sequence of functions taking (context, now) -> dict (partial results)
    A widget that raises is logged and reported under "errors"; the others still run.
    """

    def __init__(self, widgets: Sequence[Widget] = DEFAULT_WIDGETS):
        self.widgets = widgets

    def dashboard_report(self, ctx: DashboardContext, now: Optional[Instant] = None) -> Dict[str, Any]:
        now = now if now is not None else datetime.now()
        report = {
            "selected": ctx.selected.name,
            "currency": ctx.currency,
            "steps": [],
            "errors": [],
            "result": {},
        }

        acc: Dict[str, Any] = {}
        for widget in self.widgets:
            name = getattr(widget, "__name__", str(widget))
            try:
                out = widget(ctx, now)
            except Exception as e:
                logger.exception("Widget %s failed", name)
                report["errors"].append({"widget": name, "error": str(e)})
                continue
            report["steps"].append({"widget": name, "output": out})
            acc.update(out)

        report["result"] = acc
        return report
