import math


class Distribution:
    """
    Sparse discrete distribution, mapping an index (state, action or bit-pattern) to its probability.
    Entries with probability zero are not stored.
    """

    def __init__(self, values=None):
        """
        :param values: Mapping or iterable of (index, probability) pairs.
        """
        self._values = dict()
        if values is None:
            return
        items = values.items() if isinstance(values, dict) else values
        for index, probability in items:
            probability = float(probability)
            if math.isnan(probability) or math.isinf(probability):
                raise ValueError("Probability of {} is not a number: {}".format(index, probability))
            if probability < 0.0:
                raise ValueError("Probability of {} is negative: {}".format(index, probability))
            if probability > 0.0:
                self._values[index] = self._values.get(index, 0.0) + probability

    def get(self, index):
        return self._values.get(index, 0.0)

    def sum(self):
        return math.fsum(self._values.values())

    def support(self):
        return set(self._values.keys())

    def items(self):
        return self._values.items()

    def normalised(self):
        """
        Scale the distribution to total mass 1.
        :return: New distribution or None if the mass is not positive.
        """
        total = self.sum()
        if total <= 0.0:
            return None
        return Distribution({i: p / total for i, p in self._values.items()})

    def is_close(self, other, tolerance=1e-9):
        return all(abs(self.get(i) - other.get(i)) <= tolerance for i in self.support() | other.support())

    def __getitem__(self, index):
        return self.get(index)

    def __contains__(self, index):
        return index in self._values

    def __iter__(self):
        return iter(sorted(self._values))

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        return isinstance(other, Distribution) and self._values == other._values

    def __hash__(self):
        return hash(frozenset(self._values.items()))

    def __str__(self):
        return "{" + ", ".join("{}: {}".format(i, self._values[i]) for i in sorted(self._values)) + "}"

    def __repr__(self):
        return "Distribution({})".format(self)
