"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive raw data from the database and return domain model objects.
The cycle and occurrence calculators never talk to them directly; the
orchestration services in `services/` do.
"""
