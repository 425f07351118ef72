"""
CFR solver layer (Layer 4 - highest).

It may import from: dudo_cfr.tree, dudo_cfr.engine, dudo_cfr.games
"""

from dudo_cfr.solvers.dudo3 import Dudo3Trainer, StrategyEntry

__all__ = ['Dudo3Trainer', 'StrategyEntry']
