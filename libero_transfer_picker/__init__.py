"""
Libero Transfer Picker Package

Analyses a fantasy-football roster and proposes the best set of transfers
between two scoring periods, under a budget cap, a transfer limit and
position-matching rules. Three interchangeable selection strategies (greedy,
exhaustive search, integer program) share one contract.
"""

__version__ = "0.3.0"
