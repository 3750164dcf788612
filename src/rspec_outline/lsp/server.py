"""
rspec-outline Language Server implementation using pygls.

Provides document symbols (the editor outline panel) for RSpec files, plus
workspace commands that return the parsed outline for a sidebar tree.
"""

import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    InitializeParams,
    MessageType,
    Position,
    Range,
    ShowMessageParams,
    SymbolKind,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from rspec_outline.core.config import OutlineConfig, find_config
from rspec_outline.core.errors import ConfigError
from rspec_outline.core.fileset import is_spec_file
from rspec_outline.core.nodes import NodeKind, SpecNode
from rspec_outline.core.parser import parse_text
from rspec_outline.outline import (
    ActiveEditorChanged,
    DocumentChanged,
    OutlineState,
    OutlineUpdater,
    is_visible,
)

# stdout carries JSON-RPC; log to stderr only
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

OUTLINE_CHANGED_NOTIFICATION = "rspecOutline/didChangeOutline"
REFRESH_COMMAND = "rspecOutline.refresh"
OUTLINE_COMMAND = "rspecOutline.outline"

SYMBOL_KINDS: dict[NodeKind, SymbolKind] = {
    NodeKind.DESCRIBE: SymbolKind.Module,
    NodeKind.XDESCRIBE: SymbolKind.Module,
    NodeKind.CONTEXT: SymbolKind.Namespace,
    NodeKind.XCONTEXT: SymbolKind.Namespace,
    NodeKind.IT: SymbolKind.Method,
    NodeKind.XIT: SymbolKind.Method,
    NodeKind.BEFORE: SymbolKind.Function,
    NodeKind.AFTER: SymbolKind.Function,
    NodeKind.LET: SymbolKind.Variable,
}


class RSpecLanguageServer(LanguageServer):
    """Language server holding the outline configuration and update loop."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.outline_config = OutlineConfig()
        self.outline = OutlineUpdater(config=self.outline_config)
        self.outline.subscribe(self._on_outline_changed)

    def _on_outline_changed(self, state: OutlineState) -> None:
        if state.error:
            self.window_show_message(ShowMessageParams(type=MessageType.Error, message=state.error))
        self.protocol.notify(OUTLINE_CHANGED_NOTIFICATION, outline_payload(state))


# Create server instance
server = RSpecLanguageServer("rspec-outline-lsp", "v0.1.0")


@server.feature(INITIALIZE)
def initialize(ls: RSpecLanguageServer, params: InitializeParams):
    """Load configuration from the workspace root."""
    if not params.root_uri:
        return
    root = Path(to_fs_path(params.root_uri) or params.root_uri)
    logger.info(f"Workspace root: {root}")
    try:
        ls.outline_config = find_config(root)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        return
    ls.outline.config = ls.outline_config
    logging.getLogger("rspec_outline").setLevel(ls.outline_config.log_level_value)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: RSpecLanguageServer, params: DidOpenTextDocumentParams):
    """Treat an opened document as the active editor."""
    logger.info(f"Opened: {params.text_document.uri}")
    path = to_fs_path(params.text_document.uri) or params.text_document.uri
    ls.outline.post(ActiveEditorChanged(path=path, text=params.text_document.text))
    ls.outline.process_pending()


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: RSpecLanguageServer, params: DidChangeTextDocumentParams):
    """Re-parse the active document after an edit."""
    document = ls.workspace.get_text_document(params.text_document.uri)
    ls.outline.post(DocumentChanged(path=document.path, text=document.source))
    ls.outline.process_pending()


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: RSpecLanguageServer, params: DidCloseTextDocumentParams):
    """Clear the outline when its document closes."""
    logger.info(f"Closed: {params.text_document.uri}")
    path = to_fs_path(params.text_document.uri) or params.text_document.uri
    if path == ls.outline.state.current_file:
        ls.outline.post(ActiveEditorChanged(path=None))
        ls.outline.process_pending()


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: RSpecLanguageServer, params: DocumentSymbolParams) -> List[DocumentSymbol]:
    """Provide document symbols for the outline view."""
    document = ls.workspace.get_text_document(params.text_document.uri)
    if not is_spec_file(document.path, ls.outline_config.spec_suffix):
        return []

    result = parse_text(document.source, document.path)
    if not result.success:
        logger.error(f"Parsing failed: {result.error}")
        ls.window_show_message(
            ShowMessageParams(
                type=MessageType.Error,
                message=f"Failed to parse RSpec file: {result.error}",
            )
        )
        return []

    return to_document_symbols(result.nodes, ls.outline_config)


@server.command(REFRESH_COMMAND)
def refresh_command(ls: RSpecLanguageServer, *args: Any) -> dict[str, Any]:
    """Re-parse a document (default: the active one) and return its outline."""
    uri = _uri_from_args(args)
    if uri:
        document = ls.workspace.get_text_document(uri)
        ls.outline.post(ActiveEditorChanged(path=document.path, text=document.source))
    elif ls.outline.state.current_file:
        document = ls.workspace.get_text_document(Path(ls.outline.state.current_file).as_uri())
        ls.outline.post(DocumentChanged(path=document.path, text=document.source))
    ls.outline.process_pending()
    return outline_payload(ls.outline.state)


@server.command(OUTLINE_COMMAND)
def outline_command(ls: RSpecLanguageServer, *args: Any) -> dict[str, Any]:
    """Return the current outline without re-parsing."""
    return outline_payload(ls.outline.state)


# Helper functions


def symbol_kind(kind: NodeKind) -> SymbolKind:
    return SYMBOL_KINDS.get(kind, SymbolKind.Object)


def to_document_symbols(
    nodes: List[SpecNode], config: Optional[OutlineConfig] = None
) -> List[DocumentSymbol]:
    """Convert a parsed forest into nested document symbols."""
    config = config or OutlineConfig()
    symbols: List[DocumentSymbol] = []

    for node in nodes:
        if not is_visible(node, config):
            continue
        range_ = Range(
            start=Position(line=node.line - 1, character=0),
            end=Position(line=node.line - 1, character=len(node.name)),
        )
        symbols.append(
            DocumentSymbol(
                name=node.name or node.kind.value,
                detail=node.kind.value,
                kind=symbol_kind(node.kind),
                range=range_,
                selection_range=range_,
                children=to_document_symbols(node.children, config),
            )
        )

    return symbols


def outline_payload(state: OutlineState) -> dict[str, Any]:
    """Serialize outline state for clients."""
    return {
        "file": state.current_file,
        "error": state.error,
        "nodes": [node.model_dump(mode="json") for node in state.roots],
    }


def _uri_from_args(args: tuple[Any, ...]) -> Optional[str]:
    # Clients send either positional arguments or a single argument list.
    if len(args) == 1 and isinstance(args[0], list):
        args = tuple(args[0])
    if not args:
        return None
    first = args[0]
    if isinstance(first, dict):
        return first.get("uri")
    return str(first) if first else None


def start_server():
    """Start the rspec-outline language server over stdio."""
    logger.info("Starting rspec-outline Language Server...")
    server.start_io()


if __name__ == "__main__":
    start_server()
