"""Infrastructure: configuration, logging, document storage and media files."""
