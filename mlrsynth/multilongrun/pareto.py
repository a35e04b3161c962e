import logging

from mlrsynth.data.point import Point

logger = logging.getLogger(__name__)


def _facet_normal(left, right):
    """
    Normalised non-negative normal of the facet between two vertices, left having the smaller first coordinate.
    """
    w0 = left.y - right.y
    w1 = right.x - left.x
    total = w0 + w1
    if w0 < 0 or w1 < 0 or total <= 0:
        return None
    return (w0 / total, w1 / total)


def compute_pareto_curve(mlr, max_iterations=20, tolerance=1e-3):
    """
    Under-approximate the Pareto curve of two maximising objectives.
    Starts with the optima of both objectives and repeatedly optimises in the direction normal to the
    widest facet that has not been confirmed to lie on the curve.
    :param mlr: MultiLongRun with two maximising objectives.
    :param max_iterations: Maximal number of additional weighted queries.
    :param tolerance: Minimal improvement for a new vertex to be added.
    :return: List of Points sorted by the first objective, None if the constraints are not satisfiable.
    """
    p1 = mlr.solve_multi((1.0, 0.0))
    p2 = mlr.solve_multi((0.0, 1.0))
    if p1 is None or p2 is None:
        logger.info("No Pareto curve, the constraints are not satisfiable")
        return None

    vertices = sorted({p1, p2})
    closed = set()
    for iteration in range(max_iterations):
        candidates = []
        for left, right in zip(vertices, vertices[1:]):
            if (left, right) in closed:
                continue
            normal = _facet_normal(left, right)
            if normal is None:
                closed.add((left, right))
                continue
            candidates.append((left.distance(right), left, right, normal))
        if not candidates:
            break
        _, left, right, normal = max(candidates, key=lambda c: c[0])
        point = mlr.solve_multi(normal)
        if point is None or point.dot(normal) <= left.dot(normal) + tolerance or point in vertices:
            closed.add((left, right))
            continue
        logger.debug("Iteration %s: direction %s gives new vertex %s", iteration, normal, point)
        vertices = sorted(set(vertices) | {point})

    logger.info("Pareto curve with %s vertices", len(vertices))
    return vertices
