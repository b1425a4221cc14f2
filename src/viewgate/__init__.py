"""View visibility rules, legacy settings migration and the view-list navigation gate."""

__version__ = "1.0.0"
