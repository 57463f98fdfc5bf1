"""PaceKeeper: step-sequence countdown timer."""

__version__ = "0.1.0"
