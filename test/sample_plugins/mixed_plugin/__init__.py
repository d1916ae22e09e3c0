class MixedPlugin:
    """Host object of a module mixing valid and invalid configurations."""
    pass
