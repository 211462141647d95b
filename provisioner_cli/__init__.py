"""Command-line client for the Repository & Board Provisioning API."""
