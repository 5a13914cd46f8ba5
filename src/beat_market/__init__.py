"""Beat Market: marketplace backend for buying and selling beats."""

__version__ = "0.1.0"
