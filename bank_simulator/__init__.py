"""
Bank Account Simulator

A small interactive ledger of PIN-protected demo accounts. Balances are kept
as integer cents and the account set is saved to a tab-separated flat file
between runs.
"""

__version__ = "1.0.0"
