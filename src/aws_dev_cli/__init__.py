"""Developer CLI for repetitive cross-account CloudWatch tasks."""

__version__ = "0.3.0"
