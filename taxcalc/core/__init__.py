"""Settings, logging and error tracking."""
