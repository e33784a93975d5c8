"""
Subscription Tracker - Billing Core

Calculation engine behind a subscription-expense tracker: currency
conversion, monthly/yearly spend with proration, and renewal scheduling.

DESIGN PRINCIPLES:
1. Pure calculations, no hidden state
2. Malformed optional data degrades to safe defaults
3. Invalid currency codes fail loudly
4. Renewals are explicit, idempotent batch operations
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Subscription Tracker Team"
