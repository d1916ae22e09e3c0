class StrictPlugin:
    """Host object of a module whose configurations validate their own values."""
    pass
