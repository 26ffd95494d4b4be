# assortment/services/solvers/__init__.py
"""
Solvers for closest-sum selection.

The local adapter is exact (binary expansion + DP); remote transports reach an
approximate external solver whose answer is validated before use.
"""
