class BackendUnavailableError(Exception):
    """
    Error which is meant to be raised when an LP backend is known but cannot be used,
    e.g. because its python module is missing or the optimizer has no valid license.
    """

    def __init__(self, message, backend=None):
        """
        Constructor.
        :param message: Error message.
        :param backend: Name of the backend.
        """
        super().__init__(message)
        self.message = message
        self.backend = backend
