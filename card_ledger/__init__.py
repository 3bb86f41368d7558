"""
Card Ledger - Source Package

A local ledger for a personal credit card portfolio: cards, their
monthly spend and rewards, and the time-sensitive alerts they warrant.

DESIGN PRINCIPLES:
1. The ledger is the only writer of cards, alerts and paid periods
2. Alerts are derived from state, never edited
3. Storage failures degrade to in-memory operation, visibly
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Card Ledger Team"
