"""Episode Explorer: load, validate, filter, sort, group, and export an episode guide."""
