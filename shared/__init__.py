"""
Shared infrastructure for the novel scraper.

- `shared.config` for environment-based configuration
- `shared.logging` for structlog-based structured logging

The scraper pipeline, the API service and the CLI all treat `shared/` as
read-only infrastructure code.
"""
