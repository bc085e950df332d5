"""Federal income tax estimator for ordinary and qualified income."""

__version__ = "0.1.0"
