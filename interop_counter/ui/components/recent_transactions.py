"""
Recent transactions widget
"""

from typing import List

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ...models import TransactionRecord
from ...utils.formatters import format_address, format_clock_time, format_method


class RecentTransactions(VerticalScroll):
    """Latest cross-chain operations, newest first"""

    def __init__(self):
        super().__init__()
        self.border_title = "Recent Transactions"
        self._content = Static("No transactions yet")

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        yield self._content

    def update_transactions(self, records: List[TransactionRecord]):
        """Show the given records in order"""
        if not records:
            self._content.update(Text("No transactions yet", style="dim"))
            return

        table = Table(show_header=True, header_style="bold cyan", box=None, expand=True)
        table.add_column("Method", style="yellow", ratio=2)
        table.add_column("Chain", justify="center", style="magenta", ratio=1)
        table.add_column("Time", justify="center", style="blue", ratio=2)
        table.add_column("Tx", style="dim", ratio=2)
        table.add_column("Status", justify="right", ratio=1)

        for record in records:
            status = Text("ok", style="green") if record.success else Text("failed", style="red")
            table.add_row(
                format_method(record.method),
                str(record.chain_id),
                format_clock_time(record.timestamp),
                format_address(record.transaction_hash, head=10, tail=4),
                status,
            )
        self._content.update(table)
