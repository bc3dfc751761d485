"""
Source chain panel with the two increment methods
"""

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Button, Rule, Static

from ...config import Config
from ...managers.state_manager import ApplicationState
from ...models import TransactionMethod
from ...utils.formatters import format_chain

BUTTON_IDS = {
    TransactionMethod.INCREMENTER: "increment-button",
    TransactionMethod.DIRECT: "send-message-button",
}

BUTTON_LABELS = {
    TransactionMethod.INCREMENTER: "Increment",
    TransactionMethod.DIRECT: "Send Message",
}


class SourceChainPanel(VerticalScroll):
    """Describes both contract calls and offers a button for each"""

    def __init__(self, config: Config, **kwargs):
        super().__init__(**kwargs)
        self.config = config
        self.border_title = format_chain(config.source_chain_id, config.source_chain_name)

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        cfg = self.config
        with Vertical(classes="method-card"):
            yield Static(
                "Method 1: call [b]increment[/b] on the [b]CrossChainCounterIncrementer[/b] contract.",
                classes="panel-hint",
            )
            yield Static(f"[bold]CrossChainCounterIncrementer[/bold]\n[dim]{cfg.incrementer_address}[/dim]")
            yield Static(
                "[bold]increment(uint256 counterChainId, address counterAddress)[/bold]\n"
                f"  counterChainId: {cfg.destination_chain_id}\n"
                f"  counterAddress: {cfg.counter_address}",
                classes="call-signature",
            )
            yield Button(
                BUTTON_LABELS[TransactionMethod.INCREMENTER],
                id=BUTTON_IDS[TransactionMethod.INCREMENTER],
                variant="primary",
            )

        yield Rule()

        with Vertical(classes="method-card"):
            yield Static(
                "Method 2: send the message by calling [b]sendMessage[/b] on the "
                "[b]L2ToL2CrossDomainMessenger[/b] contract directly.",
                classes="panel-hint",
            )
            yield Static(f"[bold]L2ToL2CrossDomainMessenger[/bold]\n[dim]{cfg.messenger_address}[/dim]")
            yield Static(
                "[bold]sendMessage(uint256 _destination, address _target, bytes _message)[/bold]\n"
                f"  _destination: {cfg.destination_chain_id}\n"
                f"  _target: {cfg.counter_address}\n"
                "  _message: [bold]increment()[/bold]",
                classes="call-signature",
            )
            yield Button(
                BUTTON_LABELS[TransactionMethod.DIRECT],
                id=BUTTON_IDS[TransactionMethod.DIRECT],
                variant="primary",
            )

    def update_from_state(self, state: ApplicationState):
        """Disable a method's button while its transaction is in flight"""
        for method, button_id in BUTTON_IDS.items():
            button = self.query_one(f"#{button_id}", Button)
            pending = method in state.pending_methods
            button.disabled = pending
            button.label = "Waiting for confirmation..." if pending else BUTTON_LABELS[method]
