"""PDF audit toolkit: PDF-link discovery and accessibility report merging."""
