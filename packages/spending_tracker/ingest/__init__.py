"""CSV ingest: column detection and bank export adapters."""
