"""tapyrus-script — standard output script classification and construction."""

__version__ = "0.1.0"
