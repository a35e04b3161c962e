import logging
from collections import defaultdict

from mlrsynth.data.model import MDP
from mlrsynth.data.rewards import Rewards
from mlrsynth.util import check_filepath_for_reading

logger = logging.getLogger(__name__)


def _data_lines(location):
    """
    Yield the split non-empty, non-comment lines of a file, with their line numbers.
    """
    with open(location) as f:
        for number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            yield number, line.split()


def _parse_fields(location, number, fields, types):
    if len(fields) != len(types):
        raise ValueError("{}:{}: expected {} fields, got {}".format(location, number, len(types), len(fields)))
    try:
        return [t(f) for t, f in zip(types, fields)]
    except ValueError:
        raise ValueError("{}:{}: malformed entry '{}'".format(location, number, " ".join(fields)))


def read_tra_file(location, initial_state=0):
    """
    Read the transitions of an MDP in explicit format.
    Header: states choices transitions, rows: state action successor probability.
    :param location: Path to the .tra file.
    :param initial_state: The initial state.
    :return: MDP.
    """
    check_filepath_for_reading(location, "transition file")
    lines = _data_lines(location)
    try:
        number, header = next(lines)
    except StopIteration:
        raise ValueError("{}: empty transition file".format(location))
    num_states, num_choices, num_transitions = _parse_fields(location, number, header[:3], [int, int, int])

    choices = [defaultdict(dict) for _ in range(num_states)]
    read_transitions = 0
    for number, fields in lines:
        state, action, succ, prob = _parse_fields(location, number, fields, [int, int, int, float])
        if not 0 <= state < num_states:
            raise ValueError("{}:{}: state {} out of range".format(location, number, state))
        choices[state][action][succ] = prob
        read_transitions += 1

    if read_transitions != num_transitions:
        logger.warning("Header of %s announces %s transitions, read %s", location, num_transitions, read_transitions)
    read_choices = sum(len(c) for c in choices)
    if read_choices != num_choices:
        logger.warning("Header of %s announces %s choices, read %s", location, num_choices, read_choices)

    state_choices = []
    for state, actions in enumerate(choices):
        if sorted(actions.keys()) != list(range(len(actions))):
            raise ValueError("{}: actions of state {} are not numbered consecutively".format(location, state))
        state_choices.append([actions[a] for a in range(len(actions))])
    logger.info("Read %s states and %s transitions from %s", num_states, read_transitions, location)
    return MDP(num_states, state_choices, initial_state)


def read_srew_file(location):
    """
    Read state rewards. Header: states count, rows: state reward.
    :return: Dict state -> reward.
    """
    check_filepath_for_reading(location, "state reward file")
    rewards = dict()
    lines = _data_lines(location)
    next(lines, None)
    for number, fields in lines:
        state, reward = _parse_fields(location, number, fields, [int, float])
        rewards[state] = reward
    return rewards


def read_trew_file(location, mdp):
    """
    Read transition rewards. Header: states choices count, rows: state action successor reward.
    Rewards are folded into one value per (state, action) weighted by the transition probability.
    :return: Dict (state, action) -> reward.
    """
    check_filepath_for_reading(location, "transition reward file")
    rewards = defaultdict(float)
    lines = _data_lines(location)
    next(lines, None)
    for number, fields in lines:
        state, action, succ, reward = _parse_fields(location, number, fields, [int, int, int, float])
        if not 0 <= state < mdp.num_states() or not 0 <= action < mdp.num_choices(state):
            raise ValueError("{}:{}: unknown choice ({}, {})".format(location, number, state, action))
        probability = dict(mdp.transitions(state, action)).get(succ, 0.0)
        rewards[(state, action)] += probability * reward
    return dict(rewards)


def read_explicit_mdp(tra_path, srew_path=None, trew_path=None, initial_state=0, reward_name=""):
    """
    Read an MDP and optionally one reward structure from explicit files.
    :param tra_path: Path to the .tra file.
    :param srew_path: Path to the .srew file or None.
    :param trew_path: Path to the .trew file or None.
    :param initial_state: The initial state.
    :param reward_name: Name of the reward structure.
    :return: Pair (MDP, Rewards); the rewards are None if no reward file is given.
    """
    mdp = read_tra_file(tra_path, initial_state)
    if srew_path is None and trew_path is None:
        return mdp, None
    state_rewards = read_srew_file(srew_path) if srew_path is not None else None
    transition_rewards = read_trew_file(trew_path, mdp) if trew_path is not None else None
    return mdp, Rewards(state_rewards, transition_rewards, reward_name)
