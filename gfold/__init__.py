"""gfold: keep track of many Git repositories at once."""

__version__ = "0.1.0"
