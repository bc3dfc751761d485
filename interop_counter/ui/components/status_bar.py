"""
Status bar component for the dashboard
"""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Static

from ...config import Config
from ...managers.state_manager import ApplicationState
from ...utils.formatters import format_chain


class StatusItem(Static):
    """Individual status bar item with proper styling"""

    def __init__(self, content: str = "", classes: str = ""):
        super().__init__(content)
        if classes:
            self.add_class(classes)


class StatusBar(Static):
    """Status bar that reacts to state changes"""

    # Reactive attributes that trigger re-renders
    connection_text = reactive("Disconnected")
    counter_text = reactive("Counter: —")
    analytics_text = reactive("Live | Last Hour")

    def __init__(self, state_manager, config: Config):
        super().__init__(id="status-bar-container")
        self.state_manager = state_manager
        self.route_text = (
            f"{format_chain(config.source_chain_id, config.source_chain_name)} → "
            f"{format_chain(config.destination_chain_id, config.destination_chain_name)}"
        )
        # Subscribe to state changes
        self.state_manager.subscribe(self.update_from_state)

    def compose(self) -> ComposeResult:
        """Create the status bar layout"""
        with Horizontal(id="status-bar"):
            yield StatusItem(self.connection_text, classes="connection-text")
            yield StatusItem(self.route_text, classes="route-text")
            yield StatusItem(self.counter_text, classes="counter-text")
            yield StatusItem(self.analytics_text, classes="analytics-text")

    def update_from_state(self, state: ApplicationState):
        """Update the status bar from application state"""
        marker = "●" if state.is_connected else "○"
        self.connection_text = f"{marker} {state.connection_status}"

        if state.counter_value is not None:
            self.counter_text = f"Counter: {state.counter_value:,}"
        else:
            self.counter_text = "Counter: —"

        mode = "Live" if state.is_live else "Paused"
        self.analytics_text = f"{mode} | {state.selected_window.label}"

        self._update_child_widgets()

    def _update_child_widgets(self):
        """Update child widgets with current reactive values"""
        if not self.is_mounted:
            return
        self.query_one(".connection-text", StatusItem).update(self.connection_text)
        self.query_one(".route-text", StatusItem).update(self.route_text)
        self.query_one(".counter-text", StatusItem).update(self.counter_text)
        self.query_one(".analytics-text", StatusItem).update(self.analytics_text)
