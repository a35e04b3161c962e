from abc import ABCMeta, abstractmethod


class Strategy(metaclass=ABCMeta):
    """
    A (possibly randomised) strategy resolving the non-determinism of an MDP.
    """

    @abstractmethod
    def init(self, state):
        """
        Start a run in the given state.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def update_memory(self, action, state):
        """
        Inform the strategy that action was taken and state was reached.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def get_next_move(self, state):
        """
        Distribution over the actions of the state.
        Raises InvalidStrategyStateError if the strategy does not define a move.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def reset(self):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def get_memory_size(self):
        """
        :return: Number of memory elements as int, 0 for memoryless strategies.
        """
        raise NotImplementedError("Abstract function called")

    def description(self):
        return type(self).__name__
