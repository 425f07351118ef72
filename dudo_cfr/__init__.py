"""
Dudo CFR Trainer

Counterfactual Regret Minimization for two-player, one-die Dudo
with a bounded (last three bids) information abstraction.
"""

__version__ = "0.1.0"
