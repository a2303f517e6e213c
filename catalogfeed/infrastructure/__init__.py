"""Infrastructure: configuration, logging and outbound clients."""
