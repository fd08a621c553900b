"""
Pydantic / datamodels used by the rolling log runtime.

Split into:
- log_models: LogLevel + LogEntry + WriterState + FlushResult
- config_models: LogConfig (validated, mutable settings snapshot)
"""
