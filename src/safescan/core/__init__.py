"""Core application infrastructure: config, errors, middleware, lifecycle."""
