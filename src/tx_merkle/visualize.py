"""
Merkle Tree Visualization Module

This module provides rich renderables that help users understand the tree
structure and how a proof walks from a leaf up to the root.
"""

from typing import Optional, Set, Tuple

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .models import ProofDocument
from .tree import MerkleTree
from .utils import shorten_digest


def _proof_positions(leaf_index: int, height: int) -> Tuple[Set[Tuple[int, int]], Set[Tuple[int, int]]]:
    """
    Positions (layer, index) on the path from a leaf to the root, and the
    positions of the siblings used by its proof.
    """
    path = set()
    siblings = set()
    for layer in range(height):
        position = leaf_index >> layer
        path.add((layer, position))
        if layer < height - 1:
            siblings.add((layer, position ^ 1))
    return path, siblings


def render_tree(
    tree: MerkleTree,
    highlight_index: Optional[int] = None,
    full_digests: bool = False,
) -> Tree:
    """
    Render the tree as a rich Tree, root first.

    Args:
        tree: The tree to render
        highlight_index: Leaf position whose proof path should be highlighted
        full_digests: Show complete digests instead of shortened ones

    Returns:
        rich Tree renderable
    """
    if tree.is_empty:
        reason = tree.build_error.message if tree.build_error else "empty tree"
        return Tree(f"[red]No root[/red] ({reason})")

    levels = tree.levels()
    height = len(levels)
    path, siblings = set(), set()
    if highlight_index is not None:
        path, siblings = _proof_positions(highlight_index, height)

    def label(layer: int, index: int) -> str:
        digest = levels[layer][index]
        text = digest if full_digests else shorten_digest(digest)
        if layer == 0:
            text = f"{text}  [dim]#{index}[/dim] {escape(repr(tree.transactions[index]))}"
        if (layer, index) in path:
            return f"[bold green]{text}[/bold green]"
        if (layer, index) in siblings:
            return f"[bold yellow]{text}[/bold yellow]"
        return text

    def attach(branch: Tree, layer: int, index: int) -> None:
        if layer == 0:
            return
        for child in (2 * index, 2 * index + 1):
            attach(branch.add(label(layer - 1, child)), layer - 1, child)

    root_layer = height - 1
    rendered = Tree(f"[bold cyan]root[/bold cyan] {label(root_layer, 0)}")
    attach(rendered, root_layer, 0)
    return rendered


def render_proof(document: ProofDocument) -> Table:
    """
    Render a proof as a table, one row per proof step.

    The side column tells on which side of the running digest the
    sibling is concatenated at that layer.
    """
    table = Table(title=f"Inclusion proof for {escape(repr(document.transaction))}")
    table.add_column("Step", style="cyan", justify="right")
    table.add_column("Index", justify="right")
    table.add_column("Sibling side", style="magenta")
    table.add_column("Sibling digest", style="green")

    index = document.index
    for step, sibling in enumerate(document.proof):
        side = "right" if index % 2 == 0 else "left"
        table.add_row(str(step), str(index), side, sibling)
        index //= 2

    table.caption = f"root {document.root} ({document.algorithm})"
    return table


def render_summary(tree: MerkleTree) -> Table:
    """Render the main properties of a tree as a two column table."""
    table = Table(title="Merkle Tree Information")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Transactions", str(len(tree)))
    table.add_row("Algorithm", tree.algorithm)
    table.add_row("Height", str(tree.height))
    table.add_row("Nodes", str(tree.node_count))
    table.add_row("Root", tree.root_digest() or "-")
    if tree.build_error is not None:
        table.add_row("Build error", f"[red]{tree.build_error.code}[/red]")
    return table
