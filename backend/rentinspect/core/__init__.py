"""Configuration, database, security and error types shared by every layer."""
