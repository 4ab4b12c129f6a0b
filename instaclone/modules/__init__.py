"""Domain modules (models, schemas and store helpers) grouped by feature."""
