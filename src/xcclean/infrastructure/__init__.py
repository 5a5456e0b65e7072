"""Infrastructure layer — filesystem, Apple developer tools, history database."""
