"""Site configuration commands (show, layers, explain, validate)."""
