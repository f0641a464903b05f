"""Record-level operations built on the mapper and transport."""
