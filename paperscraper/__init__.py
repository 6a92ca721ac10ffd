"""paperscraper: article extraction for Founder-style digital newspapers."""

__version__ = "0.1.0"
