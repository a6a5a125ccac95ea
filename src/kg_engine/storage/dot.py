"""
Graphviz DOT export.

Renders the graph for external layout, e.g.::

    dot -Tpng -Gdpi=300 kg_graph.dot -o graph.png
"""

from pathlib import Path

from kg_engine.config import ExportSettings
from kg_engine.core.exceptions import GraphFileError
from kg_engine.graph_store.store import GraphStore
from kg_engine.utils.logging import get_logger

logger = get_logger(__name__)


def quote(value: str) -> str:
    """Quote a DOT identifier, escaping backslashes and double quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_dot(store: GraphStore, settings: ExportSettings | None = None) -> str:
    """
    Render the graph as DOT text.

    Entities without outgoing relations get a standalone node
    statement; every relation becomes a labeled edge.

    Args:
        store: Graph to render
        settings: Styling; defaults are used when None

    Returns:
        Complete DOT document
    """
    style = settings or ExportSettings()
    font = quote(style.font_name)

    lines = [
        "digraph KnowledgeGraph {",
        f"  rankdir={style.rankdir};",
        "  layout=dot;",
        f"  graph [splines=true, overlap=false, ranksep=1.3, nodesep=1.0, "
        f"fontsize=12, fontname={font}, bgcolor=\"#FFFFFF\"];",
        f"  node [shape=box, style=filled, fontname={font}, fontsize=11, penwidth=1.5, "
        f"color={quote(style.node_color)}, fillcolor={quote(style.node_fill_color)}, "
        f"fontcolor=\"#202124\"];",
        f"  edge [color={quote(style.edge_color)}, fontname={font}, fontsize=10, "
        f"penwidth=1.3, arrowsize=0.85, fontcolor=\"#3C4043\"];",
        "",
    ]

    for entity in store.entities():
        if entity.out_degree == 0:
            lines.append(f"  {quote(entity.name)};")
        for relation in entity.relations:
            lines.append(
                f"  {quote(entity.name)} -> {quote(relation.target.name)} "
                f"[label={quote(relation.label)}];"
            )

    lines.append("}")
    return "\n".join(lines) + "\n"


def export_dot(
    store: GraphStore,
    path: Path | str,
    settings: ExportSettings | None = None,
) -> Path:
    """
    Write the DOT rendering of the graph to a file.

    Args:
        store: Graph to export
        path: Destination file
        settings: Styling options

    Returns:
        Path written

    Raises:
        GraphFileError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_dot(store, settings), encoding="utf-8")
    except OSError as e:
        raise GraphFileError(f"Cannot create '{path}'", path=str(path)) from e

    logger.info(f"Exported DOT graph to '{path}'")
    return path
