"""Core repository metadata resolution."""

__all__ = [
    "config",
    "diagnostics",
    "gitfiles",
    "model",
    "patterns",
    "reporter",
    "resolver",
    "s3util",
]
