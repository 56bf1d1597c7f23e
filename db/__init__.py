"""
db/ - Database Layer
====================
Handles PostgreSQL connections and schema initialization for salary profiles,
salary cycles, scheduled payments and payment occurrences.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
