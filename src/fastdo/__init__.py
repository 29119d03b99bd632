"""fastdo - personal task tracker with natural-language due dates."""

__version__ = "0.1.0"
