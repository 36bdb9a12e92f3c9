"""Query composition: request building, substitutions and result shaping."""
