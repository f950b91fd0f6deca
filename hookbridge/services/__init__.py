"""Service layer: webhooks, OAuth providers, API client, lifecycle events."""
