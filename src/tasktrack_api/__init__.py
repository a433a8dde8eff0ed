"""
Task Tracker backend package.

Username/password accounts with bearer-token sessions and per-user todo
lists, persisted to a single JSON snapshot. The FastAPI app lives in
`tasktrack_api.main` (`app`, or `create_app()` for a configured instance).
"""

__version__ = "0.1.0"
