"""FDA adverse event insights: openFDA queries aggregated into dashboard summaries."""

__version__ = "0.1.0"
