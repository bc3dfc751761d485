"""
Activity graph widget showing the transaction histogram for the selected window
"""

from typing import List

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Static

from ...models import HistogramBucket, MetricsSnapshot, TimeWindow

BLOCKS = [" ", "▁", "▂", "▃", "▄", "▅", "▆", "▇", "█"]
LABEL_WIDTH = 5


def render_histogram(counts: List[int], width: int, height: int = 8) -> str:
    """Render bucket counts as vertical bars with a Y-axis.

    Each bucket gets an equal share of ``width`` (at least one column) and the
    axis always starts at zero so empty buckets stay flat.
    """
    if not counts or height <= 0:
        return ""

    max_val = max(max(counts), 1)
    column_width = max(1, (width - LABEL_WIDTH) // len(counts))
    bar_width = max(1, column_width - 1) if column_width > 1 else 1
    steps = len(BLOCKS) - 1

    lines = [[] for _ in range(height)]
    for count in counts:
        # Height in eighths of a line
        eighths = round(count / max_val * height * steps)
        if count > 0:
            eighths = max(eighths, 1)
        for row in range(height):
            level = row * steps
            filled = min(max(eighths - level, 0), steps)
            cell = BLOCKS[filled] * bar_width + " " * (column_width - bar_width)
            lines[height - 1 - row].append(cell)

    output = []
    for i, cells in enumerate(lines):
        if i == 0:
            label = f"{max_val:>{LABEL_WIDTH - 1}} "
        elif i == height - 1:
            label = f"{0:>{LABEL_WIDTH - 1}} "
        else:
            label = " " * LABEL_WIDTH
        output.append(label + "".join(cells))
    return "\n".join(output)


class ActivityGraph(Vertical):
    """Transaction timeline with window selection buttons"""

    def __init__(self):
        super().__init__(id="activity-graph")
        self.border_title = "Transaction Timeline"
        self.graph_display = Static("", id="graph-display")
        self._buckets: List[HistogramBucket] = []

    def compose(self) -> ComposeResult:
        """Compose the widget"""
        with Horizontal(classes="graph-controls"):
            yield Static("Window:", classes="graph-label")
            for window in TimeWindow:
                yield Button(window.value, id=f"window-{window.value}", classes="time-button")
            yield Static("", classes="graph-spacer")
            yield Static("", id="graph-total", classes="graph-value")

        yield self.graph_display

        with Horizontal(classes="time-scale"):
            yield Static("", classes="time-spacer")
            yield Static("", id="time-start", classes="time-marker")
            yield Static("", id="time-mid", classes="time-marker-center")
            yield Static("", id="time-end", classes="time-marker-right")

    def update_metrics(self, metrics: MetricsSnapshot):
        """Redraw the graph for a new snapshot"""
        self._buckets = list(metrics.histogram)
        self._highlight_window(metrics.window)

        width = self.graph_display.size.width
        if width <= 0:
            width = 80  # fallback before first layout
        counts = [bucket.count for bucket in self._buckets]
        self.graph_display.update(render_histogram(counts, width))
        self.query_one("#graph-total", Static).update(
            f"{metrics.total_count} in {metrics.window.label.lower()}"
        )

        if self._buckets:
            self.query_one("#time-start", Static).update(self._buckets[0].label)
            self.query_one("#time-mid", Static).update(self._buckets[len(self._buckets) // 2].label)
            self.query_one("#time-end", Static).update(self._buckets[-1].label)

    def _highlight_window(self, selected: TimeWindow):
        for window in TimeWindow:
            button = self.query_one(f"#window-{window.value}", Button)
            button.set_class(window is selected, "active")
