"""Point-of-sale printing helpers: receipt model, TSPL2 label commands, identifiers and service hosting."""

__version__ = "0.1.0"