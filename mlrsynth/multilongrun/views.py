from abc import ABCMeta, abstractmethod

from mlrsynth.data.distribution import Distribution
from mlrsynth.data.model_type import ModelType


class ModelView(metaclass=ABCMeta):
    """
    What the long-run encoding needs to know about a model.
    """

    @abstractmethod
    def num_states(self):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def num_choices(self, state):
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def transitions(self, state, action):
        """
        :return: Iterable over (successor, probability).
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def initial_state(self):
        raise NotImplementedError("Abstract function called")

    def initial_distribution(self):
        return Distribution({self.initial_state(): 1.0})

    @abstractmethod
    def reward_state(self, state):
        """
        State whose rewards apply to the given state.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def reward(self, rewards, state, action):
        """
        Reward for choosing action in state.
        """
        raise NotImplementedError("Abstract function called")

    @abstractmethod
    def model_type(self):
        raise NotImplementedError("Abstract function called")


class MDPView(ModelView):
    """
    View on an explicit MDP.
    """

    def __init__(self, mdp):
        self._mdp = mdp

    def num_states(self):
        return self._mdp.num_states()

    def num_choices(self, state):
        return self._mdp.num_choices(state)

    def transitions(self, state, action):
        return self._mdp.transitions(state, action)

    def initial_state(self):
        return self._mdp.initial_state()

    def reward_state(self, state):
        return state

    def reward(self, rewards, state, action):
        return rewards.state_reward(state) + rewards.transition_reward(state, action)

    def model_type(self):
        return ModelType.MDP


class ProductView(ModelView):
    """
    View on the Markov chain induced by a strategy on an MDP.
    Every compound state with successors has a single choice. Rewards are looked up on the MDP
    state the compound state projects to, with transition rewards weighted by the strategy's action
    distribution.
    """

    def __init__(self, product):
        self._product = product

    def num_states(self):
        return self._product.num_states()

    def num_choices(self, state):
        return 1 if self._product.successors(state) else 0

    def transitions(self, state, action):
        assert action == 0
        return self._product.transitions(state).items()

    def initial_state(self):
        return self._product.initial_state()

    def initial_distribution(self):
        return self._product.initial_distribution()

    def reward_state(self, state):
        return self._product.project_state(state)

    def reward(self, rewards, state, action):
        assert action == 0
        mdp_state = self.reward_state(state)
        reward = rewards.state_reward(mdp_state)
        distribution = self._product.action_distribution(state)
        if distribution is not None:
            reward += sum(p * rewards.transition_reward(mdp_state, a) for a, p in distribution.items())
        return reward

    def model_type(self):
        return ModelType.DTMC
