import math


class Point:
    """
    A n-dimensional point with float coordinates, e.g. a vertex of a Pareto curve.
    """

    def __init__(self, *args):
        """
        :param args: Numerical values to represent the point.
        """
        assert len(args) > 1, "1D point, normally not needed"
        self.coordinates = tuple(float(a) for a in args)
        self.x = self.coordinates[0]
        self.y = self.coordinates[1]

    def distance(self, other):
        return math.sqrt(sum((i - j) ** 2 for i, j in zip(self.coordinates, other.coordinates)))

    def dimension(self):
        return len(self.coordinates)

    def dot(self, weights):
        """
        Weighted sum of the coordinates.
        :param weights: Weights, one per dimension.
        :return: Scalar product.
        """
        assert len(weights) == len(self.coordinates)
        return sum(w * c for w, c in zip(weights, self.coordinates))

    def projection(self, dims):
        return Point(*[self.coordinates[i] for i in dims])

    def __str__(self):
        return "(" + ",".join([str(i) for i in self.coordinates]) + ")"

    def __iter__(self):
        return iter(self.coordinates)

    def __len__(self):
        return len(self.coordinates)

    def __getitem__(self, key):
        return self.coordinates[key]

    def __lt__(self, other):
        return self.coordinates < other.coordinates

    def __eq__(self, other):
        return isinstance(other, Point) and self.coordinates == other.coordinates

    def __hash__(self):
        return hash(self.coordinates)

    def __repr__(self):
        return "Point({})".format(", ".join(map(repr, self.coordinates)))
