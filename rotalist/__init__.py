"""Weekly rotation lists: who is on duty this week."""

__version__ = "0.1.0"
