"""
Runtime package for the rolling log writer.

This package contains:
- Models (LogEntry, LogConfig and writer state)
- Stores (the asynchronous file store the writer persists through)
- Lifecycle (host pause signal wiring)
- rolling_log: factory that assembles a ready-to-use LogDispatcher
"""
