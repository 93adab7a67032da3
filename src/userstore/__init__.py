"""Persistence of user account records with database-enforced unique usernames."""

__version__ = "0.1.0"
