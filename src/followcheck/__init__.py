"""followcheck: GitHub follower asymmetry checker."""

__version__ = "0.1.0"
