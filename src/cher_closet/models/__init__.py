"""Domain models for the wardrobe service."""
