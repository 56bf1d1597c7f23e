"""
services/ - Business Logic Layer
================================
Pure payday, cycle and occurrence calculations, plus the service classes
that load their inputs from the repositories and persist the results.
"""
