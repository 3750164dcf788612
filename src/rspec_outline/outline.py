"""
Outline view model.

Holds what an editor sidebar shows for the active spec file and how it
changes in response to editor events. State is an immutable value:
``refresh(state, event, config)`` returns the next state. ``OutlineUpdater``
feeds events from a queue through ``refresh`` on a single worker thread and
hands each new state to its listeners.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from rspec_outline.core.config import OutlineConfig
from rspec_outline.core.fileset import is_spec_file
from rspec_outline.core.nodes import NodeKind, SpecNode
from rspec_outline.core.parser import parse_text

logger = logging.getLogger(__name__)

# Theme icon names by node kind (VS Code codicons).
KIND_ICONS: dict[NodeKind, str] = {
    NodeKind.DESCRIBE: "file-directory",
    NodeKind.XDESCRIBE: "file-directory",
    NodeKind.CONTEXT: "folder",
    NodeKind.XCONTEXT: "folder",
    NodeKind.IT: "check",
    NodeKind.XIT: "check",
    NodeKind.BEFORE: "arrow-up",
    NodeKind.AFTER: "arrow-down",
    NodeKind.LET: "variable",
}
DEFAULT_ICON = "symbol-misc"
SKIPPED_ICON = "debug-stackframe-unfocused"


# ── State and events ──────────────────────────────────────────────────


@dataclass(frozen=True)
class OutlineState:
    """What the outline currently shows."""

    current_file: str | None = None
    roots: tuple[SpecNode, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class ActiveEditorChanged:
    """The focused editor changed. ``path`` is None when no editor is open."""

    path: str | None
    text: str | None = None


@dataclass(frozen=True)
class DocumentChanged:
    """The text of an open document was edited."""

    path: str
    text: str


OutlineEvent = ActiveEditorChanged | DocumentChanged


def refresh(
    state: OutlineState,
    event: OutlineEvent,
    config: OutlineConfig | None = None,
) -> OutlineState:
    """Compute the outline state that follows ``event``."""
    config = config or OutlineConfig()

    if isinstance(event, ActiveEditorChanged):
        if event.path is None:
            logger.debug("No active editor, clearing outline")
            return OutlineState()
        if not is_spec_file(event.path, config.spec_suffix):
            logger.debug("%s is not an RSpec file, clearing outline", event.path)
            return OutlineState()
        return _parse_into_state(event.path, event.text or "")

    if state.current_file is None or event.path != state.current_file:
        return state
    return _parse_into_state(event.path, event.text)


def _parse_into_state(path: str, text: str) -> OutlineState:
    result = parse_text(text, path)
    if result.success:
        logger.debug("Outline for %s has %d root nodes", path, len(result.nodes))
        return OutlineState(current_file=path, roots=tuple(result.nodes))

    logger.error("Parsing failed: %s", result.error)
    return OutlineState(
        current_file=path,
        error=f"Failed to parse RSpec file: {result.error}",
    )


# ── Presentation ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class OutlineItem:
    """Presentation of one node in a sidebar tree."""

    label: str
    expanded: bool
    tooltip: str
    icon: str
    context_value: str
    file_path: str
    line: int  # 0-based, for editor selection
    description: str | None = None


def tree_item(node: SpecNode) -> OutlineItem:
    item = OutlineItem(
        label=node.name,
        expanded=bool(node.children),
        tooltip=f"{node.kind.value} at line {node.line}",
        icon=KIND_ICONS.get(node.kind, DEFAULT_ICON),
        context_value=node.kind.value,
        file_path=node.file_path,
        line=node.line - 1,
    )
    if node.is_skipped:
        item = replace(
            item,
            icon=SKIPPED_ICON,
            context_value=f"{node.kind.value}_skipped",
            description="(skipped)",
        )
    return item


def is_visible(node: SpecNode, config: OutlineConfig) -> bool:
    if node.is_hook and not config.show_hooks:
        return False
    if node.kind is NodeKind.LET and not config.show_lets:
        return False
    return True


def visible_children(node: SpecNode, config: OutlineConfig) -> list[SpecNode]:
    return [child for child in node.children if is_visible(child, config)]


def visible_roots(state: OutlineState, config: OutlineConfig) -> list[SpecNode]:
    return [node for node in state.roots if is_visible(node, config)]


# ── Update loop ───────────────────────────────────────────────────────

Listener = Callable[[OutlineState], None]

_STOP = object()


@dataclass
class OutlineUpdater:
    """
    Single-threaded update loop over a queue of editor events.

    Producers call ``post`` from any thread. Either run the loop on its own
    worker thread with ``start``/``stop``, or drain it inline with
    ``process_pending`` (useful in tests and synchronous hosts).
    """

    config: OutlineConfig = field(default_factory=OutlineConfig)
    state: OutlineState = field(default_factory=OutlineState)
    listeners: list[Listener] = field(default_factory=list)
    _events: queue.Queue = field(default_factory=queue.Queue, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)
    _stop_requested: bool = field(default=False, repr=False)

    def subscribe(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def post(self, event: OutlineEvent) -> None:
        self._events.put(event)

    def process_pending(self) -> OutlineState:
        """Apply every queued event on the calling thread."""
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return self.state
            if event is _STOP:
                return self.state
            self._apply(event)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="rspec-outline-updater", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        if self._thread is None:
            return
        # One stop marker per worker, however often stop is retried
        if not self._stop_requested:
            self._events.put(_STOP)
            self._stop_requested = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Outline updater did not stop within %s seconds", timeout)
            return
        self._thread = None
        self._stop_requested = False

    def _run(self) -> None:
        while True:
            event = self._events.get()
            if event is _STOP:
                break
            self._apply(event)

    def _apply(self, event: OutlineEvent) -> None:
        new_state = refresh(self.state, event, self.config)
        if new_state is self.state:
            return
        self.state = new_state
        self._notify(new_state)

    def _notify(self, state: OutlineState) -> None:
        for listener in self.listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Outline listener failed: {e}")


def flatten_items(roots: Sequence[SpecNode], config: OutlineConfig) -> list[tuple[int, OutlineItem]]:
    """Visible nodes as ``(depth, item)`` pairs in display order."""
    items: list[tuple[int, OutlineItem]] = []

    def visit(nodes: Sequence[SpecNode], depth: int) -> None:
        for node in nodes:
            if not is_visible(node, config):
                continue
            items.append((depth, tree_item(node)))
            visit(node.children, depth + 1)

    visit(roots, 0)
    return items
