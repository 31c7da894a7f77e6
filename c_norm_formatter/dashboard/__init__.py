"""HTTP API for editors and tools."""
