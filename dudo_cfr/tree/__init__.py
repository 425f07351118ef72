"""
Node collection layer (Layer 3).

Builds the arena of node holders and their structural links.
It may only import from: dudo_cfr.games, dudo_cfr.engine
"""

from dudo_cfr.tree.builder import (
    NodeHolder,
    NodeCollection,
    build_node_collection,
    print_tree_stats,
)

__all__ = [
    'NodeHolder',
    'NodeCollection',
    'build_node_collection',
    'print_tree_stats',
]
