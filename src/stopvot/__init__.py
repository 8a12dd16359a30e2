"""stopvot: VOT and closure measurement from hand-labeled TextGrids."""

__version__ = "0.1.0"
