"""
Architecture contract tests using grimp.

These tests enforce the layered architecture:
- games (Layer 1, lowest) - no internal dependencies
- engine (Layer 2) - can import from games
- tree (Layer 3) - can import from engine, games
- solvers (Layer 4, highest) - can import from tree, engine, games

Run with: pytest tests/test_architecture.py -v
"""

import pytest

# Try to import grimp, skip tests if not installed
grimp = pytest.importorskip("grimp")

PACKAGE = "dudo_cfr"


def internal_imports_of_layer(graph, layer):
    """Modules outside ``layer`` imported by any module inside it."""
    prefix = f"{PACKAGE}.{layer}"
    imported = set()
    for module in graph.modules:
        if module == prefix or module.startswith(prefix + "."):
            imported |= graph.find_modules_directly_imported_by(module)
    return sorted(
        m for m in imported
        if m.startswith(PACKAGE + ".") and not (m == prefix or m.startswith(prefix + "."))
    )


def layer_of(module):
    return module.split(".")[1]


class TestLayerArchitecture:
    """Test that layer dependencies are respected."""

    @pytest.fixture(autouse=True)
    def setup(self):
        """Build the import graph once for all tests."""
        self.graph = grimp.build_graph(PACKAGE)

    def test_games_has_no_internal_imports(self):
        """Layer 1 (games) should not import from any other layer."""
        internal = internal_imports_of_layer(self.graph, "games")
        assert internal == [], (
            f"games layer should not import from other layers, "
            f"but imports: {internal}"
        )

    def test_engine_only_imports_from_games(self):
        """Layer 2 (engine) can only import from Layer 1 (games)."""
        for imp in internal_imports_of_layer(self.graph, "engine"):
            assert layer_of(imp) == "games", f"engine layer imported from forbidden layer: {imp}"

    def test_tree_only_imports_from_engine_and_games(self):
        """Layer 3 (tree) can only import from Layers 1-2."""
        for imp in internal_imports_of_layer(self.graph, "tree"):
            assert layer_of(imp) in {"games", "engine"}, f"tree layer imported from forbidden layer: {imp}"

    def test_solvers_not_imported_by_lower_layers(self):
        """Layer 4 (solvers) should not be imported by lower layers."""
        for layer in ["games", "engine", "tree"]:
            internal = internal_imports_of_layer(self.graph, layer)
            assert not any(layer_of(m) == "solvers" for m in internal), (
                f"{layer} layer imports from solvers: {internal}"
            )


class TestNoCircularImports:
    """Test that the package imports cleanly."""

    def test_import_all_layers(self):
        import dudo_cfr
        import dudo_cfr.games
        import dudo_cfr.engine
        import dudo_cfr.tree
        import dudo_cfr.solvers

        assert dudo_cfr.solvers.Dudo3Trainer is not None
