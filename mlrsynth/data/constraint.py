from enum import Enum

from mlrsynth.exceptions.unsupported_query import UnsupportedQuery


class Operator(Enum):
    """
    Comparison of a long-run reward against a bound, or an optimisation direction.
    """
    R_GE = 0
    R_LE = 1
    R_MAX = 2
    R_MIN = 3

    def is_extremal(self):
        return self in [Operator.R_MAX, Operator.R_MIN]

    def __str__(self):
        return {Operator.R_GE: ">=", Operator.R_LE: "<=", Operator.R_MAX: "max", Operator.R_MIN: "min"}[self]


class Semantics(Enum):
    """
    How several probabilistic constraints are accounted for.
    Conjunctive: every constraint holds with its own probability.
    Joint: all constraints hold together.
    """
    CONJUNCTIVE = 0
    JOINT = 1

    @classmethod
    def from_string(cls, name):
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError("Unknown semantics '{}'".format(name))

    def __str__(self):
        return self.name.lower()


class Constraint:
    """
    Long-run reward constraint.
    With a probability <= 1, the long-run average must meet the bound with at least that probability.
    Otherwise the expected long-run average must meet the bound.
    """

    def __init__(self, reward, operator, bound, probability=None):
        """
        Constructor.
        :param reward: Rewards structure.
        :param operator: Operator R_GE or R_LE.
        :param bound: Bound on the long-run average reward.
        :param probability: Required satisfaction probability, None for an expectation constraint.
        """
        if operator.is_extremal():
            raise UnsupportedQuery("Constraint needs a comparison operator, got {}".format(operator))
        if probability is not None and probability < 0.0:
            raise ValueError("Probability must be non-negative, got {}".format(probability))
        self.reward = reward
        self.operator = operator
        self.bound = float(bound)
        self.probability = float(probability) if probability is not None else None

    def is_probabilistic(self):
        return self.probability is not None and self.probability <= 1.0

    def __str__(self):
        if self.is_probabilistic():
            return "P>={}[lr({}) {} {}]".format(self.probability, self.reward, self.operator, self.bound)
        return "E[lr({})] {} {}".format(self.reward, self.operator, self.bound)


class Objective:
    """
    Long-run reward to be maximised or minimised.
    """

    def __init__(self, reward, operator=Operator.R_MAX):
        if not operator.is_extremal():
            raise UnsupportedQuery("Objective needs max or min, got {}".format(operator))
        self.reward = reward
        self.operator = operator

    def is_maximising(self):
        return self.operator == Operator.R_MAX

    def __str__(self):
        return "{} lr({})".format(self.operator, self.reward)
