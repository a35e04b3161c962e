class InvalidStrategyStateError(Exception):
    """
    Error which is meant to be raised when a strategy is queried in a state/memory combination
    for which it does not define a move.
    """

    def __init__(self, message, state=None, memory=None):
        super().__init__(message)
        self.message = message
        self.state = state
        self.memory = memory
