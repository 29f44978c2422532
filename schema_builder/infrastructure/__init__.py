"""Infrastructure for applying rendered schemas to databases."""
