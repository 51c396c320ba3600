"""HTTP server for the jewel matcher."""
