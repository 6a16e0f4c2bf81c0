"""
Core configuration, logging and database.
"""
