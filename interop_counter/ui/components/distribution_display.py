"""
Method and chain distribution tables
"""

from typing import Dict, Optional

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ...models import MetricsSnapshot
from ...utils.formatters import format_chain, format_percent


class DistributionDisplay(VerticalScroll):
    """Share of transactions per method and per chain"""

    def __init__(self, chain_names: Optional[Dict[int, str]] = None):
        super().__init__()
        self.border_title = "Distribution"
        self.chain_names = chain_names or {}
        self._content = Static("Waiting for data...")

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        yield self._content

    def update_distribution(self, metrics: MetricsSnapshot):
        """Update the tables with new data"""
        self._content.update(self._format_distribution(metrics))

    def _format_distribution(self, metrics: MetricsSnapshot) -> Table:
        table = Table(show_header=True, header_style="bold cyan", box=None, expand=True)
        table.add_column("Group", style="yellow", ratio=3)
        table.add_column("Count", justify="right", style="green", ratio=1)
        table.add_column("Share", justify="right", style="magenta", ratio=1)

        total = metrics.total_count

        table.add_row("[bold]Method Distribution[/bold]", "", "", style="bold magenta")
        for method, count in metrics.method_counts.items():
            table.add_row(f"  {method.display_name}", f"{count:,}", self._share(count, total))

        table.add_row("", "", "")
        table.add_row("[bold]Chain Activity[/bold]", "", "", style="bold magenta")
        if not metrics.chain_counts:
            table.add_row(Text("  No chain activity", style="dim"), "", "")
        for chain_id in sorted(metrics.chain_counts):
            count = metrics.chain_counts[chain_id]
            label = format_chain(chain_id, self.chain_names.get(chain_id))
            table.add_row(f"  {label}", f"{count:,}", self._share(count, total))

        return table

    @staticmethod
    def _share(count: int, total: int) -> str:
        if total == 0:
            return "-"
        return format_percent(count / total * 100)
