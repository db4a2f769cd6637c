"""Korean-language learning toolkit: Hangul composition, quiz generation and question banks."""

__version__ = "0.1.0"
