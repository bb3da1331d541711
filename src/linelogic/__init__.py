"""LineLogic: a grid editor and step scheduler for wire-signal circuits."""
__version__ = "0.1.0"
