"""Development helpers (opt-in instrumentation via ``SENSORSEND_DEBUG``)."""
