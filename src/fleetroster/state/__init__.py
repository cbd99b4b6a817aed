"""State layer.

Holds the most recently reconciled roster snapshot plus locally accepted
submissions that no reconciliation pass has confirmed yet.
"""
