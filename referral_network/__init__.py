"""
Referral network core.

Closure-table referral tree, level promotion and passive income distribution.
"""

__version__ = "1.0.0"
