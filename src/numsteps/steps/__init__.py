"""Problem families: one module per family group, each tagged with @problem."""
