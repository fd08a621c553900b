"""
Host lifecycle wiring.

For now this only covers the pause signal: when writeOnPause is enabled a
PauseHook subscribes to a PauseSignal and requests an immediate flush.
"""
