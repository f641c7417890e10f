"""pplaces - keep track of the git repositories on this machine."""

__version__ = "0.1.0"
