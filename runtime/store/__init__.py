"""
Storage abstractions for the rolling log runtime.

Includes:
- FileStore: asynchronous protocol consumed by the RotatingWriter
- LocalFileStore: FileStore over the local filesystem
"""
