"""
Basic import tests to verify package structure.

Run with: pytest tests/test_imports.py -v
"""

import pytest


class TestPackageImports:
    """Test that all package modules can be imported."""

    def test_import_main_package(self):
        """Main package should be importable."""
        import dudo_cfr
        assert dudo_cfr.__version__ == "0.1.0"

    def test_import_games(self):
        """Games layer should be importable."""
        import dudo_cfr.games
        assert dudo_cfr.games.CHALLENGE == 12

    def test_import_engine(self):
        """Engine layer should be importable."""
        import dudo_cfr.engine
        assert dudo_cfr.engine.DecisionNode is not None

    def test_import_tree(self):
        """Tree layer should be importable."""
        import dudo_cfr.tree
        assert dudo_cfr.tree.build_node_collection is not None

    def test_import_solvers(self):
        """Solvers layer should be importable."""
        import dudo_cfr.solvers
        assert dudo_cfr.solvers.Dudo3Trainer is not None


class TestDependencyAvailability:
    """Test that required dependencies are available."""

    def test_numpy_available(self):
        """NumPy should be installed."""
        import numpy as np
        assert np.__version__ is not None
