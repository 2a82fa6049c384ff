"""Digital Templates : éditeur de blocs multi-tenant (templates, blocs ordonnés, rendu)."""
__version__ = "0.1.0"
