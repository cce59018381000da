"""
todo_api - multi-user todo service with token authentication.
"""

__version__ = "0.1.0"
