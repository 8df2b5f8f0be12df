"""staticloc - dictionary-driven localization of rich text that keeps per-run styling."""

from .pipeline import translate_file, translate_selection

__all__ = ["translate_file", "translate_selection"]
