"""
Common: configuration, logging, error taxonomy, persistence.
"""
