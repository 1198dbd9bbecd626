"""fitscore: explainable candidate-to-role fitness scoring."""

__version__ = "0.1.0"
