"""branchdiff — move-aware branch comparison reports for git."""

__version__ = "0.1.0"
