"""suminfo — occurrence extraction and reporting for SUMINFO police bulletins."""

__version__ = "0.1.0"
