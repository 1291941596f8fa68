class InvalidFlowInputError(ValueError):
    """Raised when nodes, edges or thresholds break the engine's input contract."""
