import pytest

from mlrsynth.analysis.mec import ECComputer
from mlrsynth.data.constraint import Semantics
from mlrsynth.exceptions.dimension_not_supported_error import DimensionNotSupportedError
from mlrsynth.multilongrun.indexer import VariableIndexBuilder, compute_bits, UNDEFINED

from helpers.helper import regression_mdp, cycle_mdp


def build(mdp, bits):
    mecs = ECComputer(mdp).compute_mecs()
    return VariableIndexBuilder(mdp, mecs, bits).build()


def test_bits():
    assert compute_bits(0, Semantics.CONJUNCTIVE) == 0
    assert compute_bits(3, Semantics.CONJUNCTIVE) == 3
    assert compute_bits(0, Semantics.JOINT) == 0
    assert compute_bits(5, Semantics.JOINT) == 1
    assert compute_bits(40, Semantics.JOINT) == 1
    assert compute_bits(29, Semantics.CONJUNCTIVE) == 29
    with pytest.raises(DimensionNotSupportedError) as excinfo:
        compute_bits(30, Semantics.CONJUNCTIVE)
    assert excinfo.value.requested_dim == 30


def test_regression_offsets():
    index = build(regression_mdp(), 2)
    assert index.num_patterns == 4
    # x: states 1, 2, 3 with 1, 3, 1 choices
    assert index.num_x == (1 + 3 + 1) * 4
    assert index.num_y == 7
    assert index.num_z == 3 * 4
    assert index.num_variables() == 20 + 7 + 12
    assert index.var_x(1, 0, 0) == 0
    assert index.var_x(2, 0, 0) == 4
    assert index.var_x(2, 2, 3) == 4 + 2 * 4 + 3
    assert index.var_x(3, 0, 1) == 17
    assert index.var_y(0, 0) == 20
    assert index.var_y(3, 0) == 26
    assert index.var_z(1, 0) == 27
    assert index.var_z(3, 3) == 38


def test_undefined_variables():
    index = build(regression_mdp(), 2)
    for action in range(2):
        for pattern in range(4):
            assert index.var_x(0, action, pattern) == UNDEFINED
    assert index.var_z(0, 0) == UNDEFINED
    assert index.var_x(1, 1, 0) == UNDEFINED
    assert index.var_x(1, 0, 4) == UNDEFINED
    assert index.var_y(1, 1) == UNDEFINED
    assert index.var_y(7, 0) == UNDEFINED
    assert not index.is_mec_state(0)
    assert index.is_mec_state(2)


@pytest.mark.parametrize("bits", [0, 1, 3])
def test_columns_partition(bits):
    mdp = cycle_mdp()
    index = build(mdp, bits)
    columns = []
    for state in range(mdp.num_states()):
        for action in range(mdp.num_choices(state)):
            columns.append(index.var_y(state, action))
            for pattern in range(index.num_patterns):
                column = index.var_x(state, action, pattern)
                if column != UNDEFINED:
                    columns.append(column)
        for pattern in range(index.num_patterns):
            column = index.var_z(state, pattern)
            if column != UNDEFINED:
                columns.append(column)
    assert sorted(columns) == list(range(index.num_variables()))
    # all x come before all y, which come before all z
    assert index.num_x == sum(mdp.num_choices(s) for s in (0, 1, 2)) * index.num_patterns


def test_offsets_increase():
    index = build(regression_mdp(), 1)
    x_offsets = [index.x_offset(s) for s in range(4) if index.is_mec_state(s)]
    y_offsets = [index.y_offset(s) for s in range(4)]
    z_offsets = [index.z_offset(s) for s in range(4) if index.is_mec_state(s)]
    offsets = x_offsets + y_offsets + z_offsets
    assert offsets == sorted(offsets)
    assert len(set(offsets)) == len(offsets)


def test_build_is_idempotent():
    mdp = regression_mdp()
    mecs = ECComputer(mdp).compute_mecs()
    builder = VariableIndexBuilder(mdp, mecs, 2)
    first = builder.build()
    second = builder.build()
    for state in range(4):
        assert first.x_offset(state) == second.x_offset(state)
        assert first.y_offset(state) == second.y_offset(state)
        assert first.z_offset(state) == second.z_offset(state)


def test_variable_names():
    index = build(regression_mdp(), 2)
    assert index.variable_name(index.var_x(2, 1, 3)) == "x_2_1_3"
    assert index.variable_name(index.var_y(0, 1)) == "y_0_1"
    assert index.variable_name(index.var_z(3, 2)) == "z_3_2"
    with pytest.raises(IndexError):
        index.variable_name(index.num_variables())
