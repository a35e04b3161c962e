import logging

import networkx as nx

logger = logging.getLogger(__name__)


class ECComputer:
    """
    Computes the maximal end components of a model.
    The model needs num_states(), num_choices(state) and transitions(state, action).
    """

    def __init__(self, model):
        self._model = model

    def _staying_actions(self, state, candidates, excluded_choices):
        for action in range(self._model.num_choices(state)):
            if (state, action) in excluded_choices:
                continue
            successors = [succ for succ, prob in self._model.transitions(state, action) if prob > 0]
            if successors and all(succ in candidates for succ in successors):
                yield action, successors

    def _prune(self, candidates, excluded_choices):
        """
        Iteratively remove states without an action whose support stays inside the candidates.
        """
        candidates = set(candidates)
        changed = True
        while changed:
            changed = False
            for state in list(candidates):
                if next(self._staying_actions(state, candidates, excluded_choices), None) is None:
                    candidates.discard(state)
                    changed = True
        return candidates

    def _graph(self, candidates, excluded_choices):
        graph = nx.DiGraph()
        graph.add_nodes_from(candidates)
        for state in candidates:
            for _, successors in self._staying_actions(state, candidates, excluded_choices):
                graph.add_edges_from((state, succ) for succ in successors)
        return graph

    def compute_mecs(self, restrict=None, accept=None, excluded_choices=None):
        """
        Compute the maximal end components by iterated refinement into strongly connected components.
        :param restrict: States the computation is restricted to, all states if None.
        :param accept: If given, only end components containing at least one of these states are returned.
        :param excluded_choices: Set of (state, action) pairs that may not be used.
        :return: List of frozensets, ordered by their smallest state.
        """
        excluded_choices = set(excluded_choices) if excluded_choices else set()
        initial = set(range(self._model.num_states())) if restrict is None else set(restrict)

        mecs = []
        worklist = [initial]
        while worklist:
            candidates = self._prune(worklist.pop(), excluded_choices)
            if not candidates:
                continue
            sccs = list(nx.strongly_connected_components(self._graph(candidates, excluded_choices)))
            if len(sccs) == 1:
                mecs.append(frozenset(candidates))
            else:
                worklist.extend(set(scc) for scc in sccs)

        if accept is not None:
            accept = set(accept)
            mecs = [mec for mec in mecs if not mec.isdisjoint(accept)]
        mecs.sort(key=min)
        logger.debug("Found %s maximal end components: %s", len(mecs), [sorted(mec) for mec in mecs])
        return mecs


def is_mec_state(mecs, state):
    return any(state in mec for mec in mecs)


def mec_of(mecs, state):
    """
    :return: The end component containing the state, None if there is none.
    """
    for mec in mecs:
        if state in mec:
            return mec
    return None


def intersect_mecs(first, second):
    """
    Pairwise non-empty intersections of two collections of end components.
    The intersections are not necessarily end components themselves; refine them by passing
    them as restriction to ECComputer.compute_mecs.
    """
    result = []
    for mec1 in first:
        for mec2 in second:
            common = mec1 & mec2
            if common:
                result.append(frozenset(common))
    result.sort(key=min)
    return result
