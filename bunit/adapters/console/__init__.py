"""Console adapters for the primary report channel."""
