"""
Account Service

Banking-account microservice: account lifecycle with business-rule
validation, commission-tiered deposits and withdrawals backed by an
append-only transaction ledger, and operational reports.
"""

__version__ = "1.0.0"
