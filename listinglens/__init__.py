"""ListingLens - marketplace listing metadata resolver."""

__version__ = "0.1.0"
