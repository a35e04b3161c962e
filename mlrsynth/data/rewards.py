class Rewards:
    """
    Reward structure with state rewards and transition (state-action) rewards.
    Missing entries are zero.
    """

    def __init__(self, state_rewards=None, transition_rewards=None, name=""):
        """
        Constructor.
        :param state_rewards: Mapping state -> reward.
        :param transition_rewards: Mapping (state, action) -> reward.
        :param name: Name of the reward structure.
        """
        self._state_rewards = dict(state_rewards) if state_rewards else dict()
        self._transition_rewards = dict(transition_rewards) if transition_rewards else dict()
        self.name = name

    def state_reward(self, state):
        return self._state_rewards.get(state, 0.0)

    def transition_reward(self, state, action):
        return self._transition_rewards.get((state, action), 0.0)

    def reward(self, state, action):
        """
        Reward obtained when choosing action in state.
        """
        return self.state_reward(state) + self.transition_reward(state, action)

    def has_state_rewards(self):
        return len(self._state_rewards) > 0

    def has_transition_rewards(self):
        return len(self._transition_rewards) > 0

    def __str__(self):
        return "R{{{}}}".format(self.name) if self.name else "R"
