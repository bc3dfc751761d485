"""
Destination chain counter state and event log display
"""

from typing import List

from rich.table import Table
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ...config import Config
from ...managers.state_manager import ApplicationState
from ...models import CounterIncrementedLog
from ...utils.formatters import format_chain


class CounterDisplay(VerticalScroll):
    """CrossChainCounter state and observed CounterIncremented events"""

    def __init__(self, config: Config, **kwargs):
        super().__init__(**kwargs)
        self.config = config
        self.border_title = format_chain(config.destination_chain_id, config.destination_chain_name)

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        yield Static("Watch for state changes as the counter is incremented from the source chain.",
                     classes="panel-hint")
        yield Static(f"[bold]CrossChainCounter[/bold]\n[dim]{self.config.counter_address}[/dim]",
                     classes="display-title")
        yield Static("Counter not read yet", id="counter-state")
        yield Static("[dim]Listening for CounterIncremented events...[/dim]", id="listening-status")
        yield Static("", id="event-logs")

    def update_from_state(self, state: ApplicationState):
        """Update counter state and the event table"""
        state_widget = self.query_one("#counter-state", Static)
        number = "—" if state.counter_value is None else f"{state.counter_value}"
        chain_id = (
            "—" if state.last_incrementer_chain_id is None else f"{state.last_incrementer_chain_id}"
        )
        sender = state.last_incrementer_sender or "—"
        state_widget.update(
            "\n".join(
                [
                    f"[bold]number:[/bold] {number}",
                    "[bold]lastIncrementer:[/bold]",
                    f"  chainId: {chain_id}",
                    f"  sender: {sender}",
                ]
            )
        )

        status_widget = self.query_one("#listening-status", Static)
        if state.is_connected:
            status_widget.update("[dim]Listening for CounterIncremented events...[/dim]")
        else:
            status_widget.update(f"[yellow]{state.connection_status}[/yellow]")

        self.query_one("#event-logs", Static).update(self._format_logs(state.event_logs))

    def _format_logs(self, logs: List[CounterIncrementedLog]):
        if not logs:
            return Text("No events yet", style="dim")

        table = Table(show_header=True, header_style="bold cyan", box=None, expand=True)
        table.add_column("blockNumber", style="yellow", ratio=1)
        table.add_column("senderChainId", justify="center", style="magenta", ratio=1)
        table.add_column("sender", style="blue", ratio=3, no_wrap=True, overflow="ellipsis")
        table.add_column("newValue", justify="right", style="green", ratio=1)

        for log in logs:
            table.add_row(
                str(log.block_number),
                str(log.sender_chain_id),
                log.sender,
                str(log.new_value),
            )
        return table
