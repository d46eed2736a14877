"""wikiweave — link resolution and transclusion over a Markdown wiki."""

__version__ = "0.1.0"
