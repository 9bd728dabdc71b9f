"""BreakBot report: pull request impact analysis for library clients."""

__version__ = "0.1.0"
