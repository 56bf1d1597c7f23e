"""
utils/ - Shared Helpers
=======================
Logging setup and calendar arithmetic.
"""
