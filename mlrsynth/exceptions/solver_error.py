class SolverError(Exception):
    """
    Error which is meant to be raised when the LP backend ran but gave no usable answer,
    e.g. because of numerical difficulties or an unbounded objective.
    Unlike infeasibility, this says nothing about the existence of a strategy.
    """

    def __init__(self, message, status=None):
        """
        Constructor.
        :param message: Error message.
        :param status: SolverStatus reported by the backend.
        """
        super().__init__(message)
        self.message = message
        self.status = status
