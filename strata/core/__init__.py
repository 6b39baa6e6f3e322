"""Core building blocks: models, errors, randomness and blob storage."""
