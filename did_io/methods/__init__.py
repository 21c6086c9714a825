"""DID method drivers."""
