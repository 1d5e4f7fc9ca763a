"""Loading of the online courses dataset."""

from .csv_loader import CSVLoader, LoadError

__all__ = ["CSVLoader", "LoadError"]
