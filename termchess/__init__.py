"""Two-player terminal chess: pieces, board rules and an interactive game."""

__version__ = "0.1.0"
__all__ = ["__version__"]