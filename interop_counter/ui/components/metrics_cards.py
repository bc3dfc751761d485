"""
Headline metric cards for the analytics view
"""

from typing import Optional

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from ...managers.state_manager import ApplicationState
from ...models import MetricsSnapshot
from ...utils.formatters import format_age, format_percent, format_rate


def _card(title: str, value: str, detail: str, value_style: str = "bold green") -> Table:
    table = Table(show_header=False, box=None, expand=True, padding=0)
    table.add_column("content")
    table.add_row(Text(title, style="bold cyan"))
    table.add_row(Text(value, style=value_style))
    table.add_row(Text(detail, style="dim"))
    return table


class MetricsCards(Horizontal):
    """Total, success rate, counter and last activity cards"""

    def __init__(self):
        super().__init__(id="metrics-cards")
        self._total = Static("Waiting for data...", classes="metric-card")
        self._success = Static("", classes="metric-card")
        self._counter = Static("", classes="metric-card")
        self._activity = Static("", classes="metric-card")

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        yield self._total
        yield self._success
        yield self._counter
        yield self._activity

    def update_cards(self, metrics: MetricsSnapshot, state: Optional[ApplicationState] = None):
        """Update every card from a snapshot and the current contract state"""
        self._total.update(
            _card("Total Transactions", f"{metrics.total_count:,}", format_rate(metrics.avg_per_hour))
        )
        self._success.update(
            _card(
                "Success Rate",
                format_percent(metrics.success_rate),
                f"{metrics.success_count:,} successful",
            )
        )

        counter_value = "—"
        counter_detail = "Counter not read yet"
        if state is not None and state.counter_value is not None:
            counter_value = f"{state.counter_value:,}"
            if state.last_incrementer_chain_id is not None:
                counter_detail = f"Last from Chain {state.last_incrementer_chain_id}"
        self._counter.update(_card("Current Counter", counter_value, counter_detail))

        if metrics.last_activity_at is None:
            self._activity.update(
                _card("Last Activity", "Idle", "No recent activity", value_style="bold yellow")
            )
        else:
            self._activity.update(
                _card("Last Activity", "Active", format_age(metrics.last_activity_at, metrics.now))
            )
