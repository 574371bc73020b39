from .polisher import ContentPolisher, count_polish_tokens, needs_polishing

__all__ = ["ContentPolisher", "count_polish_tokens", "needs_polishing"]
