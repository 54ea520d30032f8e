"""
Fintech Admin Console

Async controllers and a REST client for administering a retailer/distributor
platform: bank accounts, transaction limits, partner profiles, activity logs
and wallet top-ups.
"""

__version__ = "1.0.0"
