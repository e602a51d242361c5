"""BitBake-style variable datastore with flags, overrides, expansion and task flags."""

__version__ = "0.1.0"