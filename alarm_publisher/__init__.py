"""CloudWatch log-alarm publisher: alarm event + log sample → queued alert."""

__version__ = "0.1.0"
