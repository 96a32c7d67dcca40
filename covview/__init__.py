"""CovView - stacked coverage charts for genome model summaries."""

__version__ = "0.1.0"
