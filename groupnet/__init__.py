"""User and group command server, paired trackers, a line client and small TCP demos."""

__version__ = "0.1.0"