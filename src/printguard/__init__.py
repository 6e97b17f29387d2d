"""PrintGuard: a git pre-commit guard against debug print statements."""

__version__ = "0.1.0"
