"""Core domain: settings, models, store and services."""
