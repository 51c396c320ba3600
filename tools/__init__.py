"""Collaborators for catalog storage, image decoding and fetching."""
