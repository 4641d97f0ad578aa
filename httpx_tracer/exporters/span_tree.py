"""
span_tree.py

Render finished OpenTracing spans as a tree in the terminal using Rich,
with each span's duration and tags.
"""

from rich.markup import escape
from rich.tree import Tree


def format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.1f}ms"


def span_duration(span) -> float:
    # MockSpan.finish_time stays -1 until finish()
    if span.finish_time is None or span.finish_time < 0:
        return 0.0
    return span.finish_time - span.start_time


def build_tree(spans):
    """Group spans by parent span id, each group in start order. Roots sit under ``None``."""
    children = {}
    for span in sorted(spans, key=lambda s: s.start_time):
        children.setdefault(span.parent_id, []).append(span)
    return children


def render_children(children, parent_id, tree: Tree):
    for span in children.get(parent_id, []):
        branch = tree.add(f"[bold]{escape(span.operation_name)}[/] • {format_duration(span_duration(span))}")
        for key, value in span.tags.items():
            branch.add(f"{escape(key)} = {escape(repr(value))}")
        render_children(children, span.context.span_id, branch)


def render(spans) -> Tree:
    spans = list(spans)
    children = build_tree(spans)
    total = sum(span_duration(span) for span in children.get(None, []))
    tree = Tree(f"[b]trace[/] • {format_duration(total)} ({len(spans)} spans)")
    render_children(children, None, tree)
    return tree
