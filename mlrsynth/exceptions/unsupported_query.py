class UnsupportedQuery(Exception):
    """
    Error which is meant to be raised when a query is not supported by the synthesis engine.
    """

    def __init__(self, message):
        """
        Constructor.
        :param message: Error message.
        """
        super().__init__(message)
        self.message = message
