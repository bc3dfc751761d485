"""
Main dashboard application using dependency injection
"""

from datetime import datetime
from typing import TYPE_CHECKING

from dependency_injector.wiring import Provide, inject
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, Static, TabbedContent, TabPane

if TYPE_CHECKING:
    from ..services.logging_service import LoggingService

from ..config import Config
from ..container import Container
from ..managers import EventLedger, StateManager
from ..managers.state_manager import ApplicationState
from ..models import CounterIncrementedLog, TransactionMethod
from ..services import (
    EventService,
    MetricsService,
    ReceiptError,
    TransactionService,
    TransactionSubmissionError,
)
from ..utils.clock import current_millis
from ..utils.parsers import parse_time_window
from .components import (
    ActivityGraph,
    ActivityLogViewer,
    CounterDisplay,
    DistributionDisplay,
    MetricsCards,
    RecentTransactions,
    SourceChainPanel,
    StatusBar,
)

RECENT_TRANSACTIONS = 5


class CounterDashboard(App):
    """Cross-chain counter demo with live analytics"""

    CSS = """
    Screen {
        background: $surface;
    }

    #status-bar-container {
        dock: top;
        height: 3;
        width: 100%;
    }

    #status-bar {
        height: 3;
        background: $panel;
        border: solid $primary;
        padding: 0 1;
        width: 100%;
        layout: horizontal;
    }

    .connection-text {
        width: 1fr;
        content-align: left middle;
        color: $text;
        text-style: bold;
    }

    .route-text {
        width: 2fr;
        content-align: center middle;
        color: $warning;
    }

    .counter-text {
        width: 1fr;
        content-align: center middle;
        color: $success;
    }

    .analytics-text {
        width: 1fr;
        content-align: right middle;
        color: $primary;
        text-style: italic;
    }

    TabbedContent {
        height: 3fr;
    }

    #chains-panel {
        height: 100%;
        layout: horizontal;
    }

    #source-panel, #destination-panel {
        width: 1fr;
        border: solid $primary;
        padding: 1;
    }

    .method-card {
        height: auto;
        margin-bottom: 1;
    }

    .panel-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    .call-signature {
        background: $panel;
        padding: 1;
        margin: 1 0;
    }

    .display-title {
        margin-bottom: 1;
    }

    #analytics-header {
        height: 1;
    }

    #analytics-title {
        width: 1fr;
        text-style: bold;
    }

    #live-badge {
        width: auto;
        text-style: bold;
    }

    #metrics-cards {
        height: 5;
    }

    .metric-card {
        width: 1fr;
        border: solid $accent;
        padding: 0 1;
    }

    #activity-graph {
        height: 14;
        background: $panel;
        border: solid $primary;
        padding: 0 1;
    }

    .graph-controls {
        height: 1;
        dock: top;
        layout: horizontal;
    }

    .graph-label {
        width: auto;
        content-align: left middle;
        color: $text;
        margin-right: 1;
    }

    .time-button {
        width: auto;
        min-width: 5;
        height: 1;
        margin: 0 1;
        border: none;
        background: $surface;
        color: $text-disabled;
    }

    .time-button.active {
        background: $primary;
        color: $text;
    }

    .graph-spacer {
        width: 1fr;
    }

    .graph-value {
        width: auto;
        content-align: right middle;
        color: $success;
        text-style: bold;
    }

    #graph-display {
        width: 1fr;
        height: 10;
        color: $success;
    }

    .time-scale {
        height: 1;
        dock: bottom;
        layout: horizontal;
    }

    .time-spacer {
        width: 5;
    }

    .time-marker {
        width: auto;
        color: $text-disabled;
        text-style: italic;
    }

    .time-marker-center {
        width: 1fr;
        content-align: center middle;
        color: $text-disabled;
        text-style: italic;
    }

    .time-marker-right {
        width: auto;
        content-align: right middle;
        color: $text-disabled;
        text-style: italic;
    }

    #analytics-bottom {
        height: 1fr;
        layout: horizontal;
    }

    DistributionDisplay {
        width: 1fr;
        border: solid $accent;
        padding: 0 1;
    }

    RecentTransactions {
        width: 2fr;
        border: solid $warning;
        padding: 0 1;
    }

    #activity-log {
        height: 1fr;
        border: solid $secondary;
        padding: 0 1;
    }

    RichLog {
        background: $surface;
        color: $text;
        scrollbar-size: 1 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("i", "increment", "Increment"),
        Binding("m", "send_message", "Send message"),
        Binding("w", "cycle_window", "Window"),
        Binding("space", "toggle_live", "Live/Pause"),
        Binding("c", "clear_analytics", "Clear analytics"),
    ]

    @inject
    def __init__(
        self,
        config: Config = Provide[Container.config],
        state_manager: StateManager = Provide[Container.state_manager],
        ledger: EventLedger = Provide[Container.ledger],
        metrics_service: MetricsService = Provide[Container.metrics_service],
        transaction_service: TransactionService = Provide[Container.transaction_service],
        event_service: EventService = Provide[Container.event_service],
        logging_service: "LoggingService" = Provide[Container.logging_service],
    ):
        super().__init__()
        self.config = config
        self.state_manager = state_manager
        self.ledger = ledger
        self.metrics_service = metrics_service
        self.transaction_service = transaction_service
        self.event_service = event_service
        self.logging_service = logging_service

        self.title = "Cross-Chain Counter"
        self.sub_title = "Real-time cross-chain transaction monitoring"

        # UI components
        self.status_bar = None
        self.source_panel = None
        self.counter_display = None
        self.metrics_cards = None
        self.activity_graph = None
        self.distribution_display = None
        self.recent_transactions = None
        self.activity_log = None

    def compose(self) -> ComposeResult:
        """Create the layout"""
        yield Header()

        self.status_bar = StatusBar(self.state_manager, self.config)
        yield self.status_bar

        with TabbedContent(initial="counter-tab"):
            with TabPane("Counter Demo", id="counter-tab"):
                with Horizontal(id="chains-panel"):
                    self.source_panel = SourceChainPanel(self.config, id="source-panel")
                    yield self.source_panel

                    self.counter_display = CounterDisplay(self.config, id="destination-panel")
                    yield self.counter_display

            with TabPane("Analytics", id="analytics-tab"):
                with Vertical(id="analytics-container"):
                    with Horizontal(id="analytics-header"):
                        yield Static("Analytics Dashboard", id="analytics-title")
                        yield Static("", id="live-badge")

                    self.metrics_cards = MetricsCards()
                    yield self.metrics_cards

                    self.activity_graph = ActivityGraph()
                    yield self.activity_graph

                    with Horizontal(id="analytics-bottom"):
                        self.distribution_display = DistributionDisplay(
                            {
                                self.config.source_chain_id: self.config.source_chain_name,
                                self.config.destination_chain_id: self.config.destination_chain_name,
                            }
                        )
                        yield self.distribution_display

                        self.recent_transactions = RecentTransactions()
                        yield self.recent_transactions

        with VerticalScroll(id="activity-log"):
            self.activity_log = ActivityLogViewer()
            yield self.activity_log

        yield Footer()

    def on_mount(self) -> None:
        """Called when the app is mounted"""
        self._setup_logging()
        self._setup_observers()
        self._log_startup_info()

        self._on_state_change(self.state_manager.get_state())
        self._refresh_analytics(force=True)

        # Queues drain quickly; analytics roll forward once a second
        self.set_interval(0.1, self._process_queues)
        self.set_interval(1.0, self._refresh_analytics)

        self.run_worker(self._start_listening, exclusive=True, group="events")

    def _setup_logging(self):
        """Route logging service output to the activity log"""
        from ..services.logging_service import LogLevel

        def log_handler(message: str, level: LogLevel):
            style_map = {
                LogLevel.ERROR: "red",
                LogLevel.WARNING: "yellow",
                LogLevel.INFO: None,
                LogLevel.DEBUG: "dim",
                LogLevel.CRITICAL: "bold red",
            }
            self.activity_log.queue_message(message, style_map.get(level))

        self.logging_service.add_handler(log_handler)

    def _setup_observers(self):
        """Hook widgets up to state, ledger and event notifications"""
        self.state_manager.subscribe(self._on_state_change)
        self.ledger.subscribe(self._on_ledger_change)
        self.event_service.on_increment(self._on_increment)

    def _log_startup_info(self):
        """Log initial startup information"""
        cfg = self.config
        self.activity_log.queue_message(f"Started at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        self.activity_log.queue_message(
            f"Source: {cfg.source_chain_name} ({cfg.source_chain_id}) via {cfg.source_rpc_url}"
        )
        self.activity_log.queue_message(
            f"Destination: {cfg.destination_chain_name} ({cfg.destination_chain_id}) "
            f"via {cfg.destination_rpc_url}"
        )
        self.activity_log.queue_message(f"Ledger capacity: {self.ledger.max_capacity} records")
        self.activity_log.queue_message("")

    def _process_queues(self):
        self.activity_log.process_queue()

    def _on_state_change(self, state: ApplicationState):
        if self.source_panel:
            self.source_panel.update_from_state(state)
        if self.counter_display:
            self.counter_display.update_from_state(state)
        badge = self.query_one("#live-badge", Static)
        badge.update("[green]● Live[/green]" if state.is_live else "[yellow]❚❚ Paused[/yellow]")

    def _on_ledger_change(self, ledger: EventLedger):
        self._refresh_analytics()

    def _on_increment(self, log: CounterIncrementedLog):
        self.notify(
            f"New value: {log.new_value} from chain {log.sender_chain_id}",
            title="Counter incremented!",
            timeout=4,
        )

    def _refresh_analytics(self, force: bool = False):
        """Recompute metrics for the selected window as of now"""
        state = self.state_manager.get_state()
        if not state.is_live and not force:
            return

        metrics = self.metrics_service.query(state.selected_window, current_millis())
        self.metrics_cards.update_cards(metrics, state)
        self.activity_graph.update_metrics(metrics)
        self.distribution_display.update_distribution(metrics)
        self.recent_transactions.update_transactions(self.ledger.recent(RECENT_TRANSACTIONS))

    async def _start_listening(self):
        """Connect to the destination chain and watch for increments"""
        try:
            await self.event_service.start()
        except ConnectionError as e:
            self.notify(str(e), title="Destination chain unreachable", severity="error")

    async def _submit_transaction(self, method: TransactionMethod):
        """Send one increment and wait for its receipt"""
        await self.state_manager.set_pending(method, True)
        try:
            if method is TransactionMethod.INCREMENTER:
                tx_hash = await self.transaction_service.increment_via_incrementer()
                self.notify(
                    f"Incrementing counter on {self.config.destination_chain_name}",
                    title="Cross-chain message sent!",
                    timeout=3,
                )
            else:
                tx_hash = await self.transaction_service.send_direct_message()
                self.notify(
                    f"Using L2ToL2CrossDomainMessenger to {self.config.destination_chain_name}",
                    title="Direct message sent!",
                    timeout=3,
                )
            await self.transaction_service.wait_for_receipt(tx_hash)
        except TransactionSubmissionError as e:
            self.notify(str(e), title="Transaction failed", severity="error")
        except ReceiptError as e:
            self.notify(str(e), title="No receipt", severity="warning")
        finally:
            await self.state_manager.set_pending(method, False)

    def _submit(self, method: TransactionMethod):
        if not self.state_manager.claim_pending(method):
            return
        self.run_worker(self._submit_transaction(method), group="transactions")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dispatch button presses"""
        button_id = event.button.id or ""
        if button_id == "increment-button":
            self.action_increment()
        elif button_id == "send-message-button":
            self.action_send_message()
        elif button_id.startswith("window-"):
            window = parse_time_window(button_id[len("window-"):])
            await self.state_manager.set_window(window)
            self._refresh_analytics(force=True)

    def action_increment(self) -> None:
        """Increment through the CrossChainCounterIncrementer"""
        self._submit(TransactionMethod.INCREMENTER)

    def action_send_message(self) -> None:
        """Increment through L2ToL2CrossDomainMessenger.sendMessage"""
        self._submit(TransactionMethod.DIRECT)

    async def action_cycle_window(self) -> None:
        """Switch to the next analytics window"""
        window = self.state_manager.get_state().selected_window.next()
        await self.state_manager.set_window(window)
        self._refresh_analytics(force=True)

    async def action_toggle_live(self) -> None:
        """Pause/resume analytics updates"""
        is_live = await self.state_manager.toggle_live()
        status = "LIVE" if is_live else "PAUSED"
        self.activity_log.queue_message(f">>> Analytics {status} <<<", "bold yellow")
        if is_live:
            self._refresh_analytics(force=True)

    def action_clear_analytics(self) -> None:
        """Drop every tracked transaction"""
        self.ledger.clear()
        self.activity_log.queue_message("Analytics cleared", "yellow")
        self._refresh_analytics(force=True)

    async def on_unmount(self) -> None:
        """Close the destination chain connection"""
        if self.state_manager.get_state().is_connected:
            await self.event_service.stop()
