class ValidPlugin:
    """Host object of a module whose configurations are all well formed."""
    pass
