"""
models/ - Domain Layer
======================
Plain dataclasses for salary profiles, salary cycles, scheduled payments,
payment occurrences and the value objects the calculators return.
"""
