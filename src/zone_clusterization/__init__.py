"""GapMap competitor zoning: clustering, market-gap search and density surfaces."""

__version__ = "1.0.0"
