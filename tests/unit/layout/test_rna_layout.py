"""
Unit tests for the `RNALayout` facade.

Covers the setup/draw/extract cycle, the line and circle fallbacks for
unstructured input, pseudoknot removal and symmetrisation of one-sided
pairing lists.
"""
import math

import numpy as np
import pytest

from rna_layout.errors import LayoutStructureError
from rna_layout.layout.config import LayoutConfig
from rna_layout.layout.placement import RotationDirection
from rna_layout.layout.rna_layout import MAX_LINE_FALLBACK_LENGTH, RNALayout
from rna_layout.structures.sec_struct import SecStruct


def test_hairpin_layout_end_to_end():
    """
    A three-pair hairpin gets finite coordinates with pairs one `pair_space` apart.
    """
    ss = SecStruct.from_dot_bracket("(((...)))")
    coords = RNALayout().layout(ss)

    assert coords.length == 9
    assert np.all(np.isfinite(coords.xarray))
    for pair in ss.iter_pairs():
        dx = coords.xarray[pair.base_i] - coords.xarray[pair.base_j]
        dy = coords.yarray[pair.base_i] - coords.yarray[pair.base_j]
        assert math.hypot(dx, dy) == pytest.approx(45.0)
    assert coords.xbounds[0] <= coords.xarray.min()
    assert coords.ybounds[1] >= coords.yarray.max()


def test_long_helix_layout():
    """
    A 1,200-pair helix is laid out with every pair one `pair_space` apart.
    """
    ss = SecStruct.from_dot_bracket("(" * 1200 + "..." + ")" * 1200)
    coords = RNALayout().layout(ss)

    assert coords.length == 2403
    assert np.all(np.isfinite(coords.xarray))
    assert np.all(np.isfinite(coords.yarray))
    for pair in ss.iter_pairs():
        dx = coords.xarray[pair.base_i] - coords.xarray[pair.base_j]
        dy = coords.yarray[pair.base_i] - coords.yarray[pair.base_j]
        assert math.hypot(dx, dy) == pytest.approx(45.0)


def test_layout_is_deterministic():
    """
    Two independent layouts of the same input are bit-identical.
    """
    structure = SecStruct.from_dot_bracket("..((.((...)).(..)))..((...))")
    first = RNALayout().layout(structure)
    second = RNALayout().layout(structure)
    assert np.array_equal(first.xarray, second.xarray)
    assert np.array_equal(first.yarray, second.yarray)
    assert first.xbounds == second.xbounds
    assert first.ybounds == second.ybounds


def test_explicit_steps_match_layout():
    """
    Running the three steps by hand gives the same result as `layout`.
    """
    ss = SecStruct.from_dot_bracket("((..))..")
    layout = RNALayout()
    layout.setup_tree(ss)
    layout.draw_tree()
    stepped = layout.get_coords(ss.length)

    combined = RNALayout().layout(ss)
    assert np.array_equal(stepped.xarray, combined.xarray)
    assert np.array_equal(stepped.yarray, combined.yarray)


def test_get_coords_draws_on_demand():
    """
    `get_coords` places the tree itself when `draw_tree` was skipped.
    """
    layout = RNALayout()
    layout.setup_tree(SecStruct.from_dot_bracket("(...)"))
    assert layout.placements == {}
    coords = layout.get_coords(5)
    assert np.all(np.isfinite(coords.xarray))
    assert layout.placements


@pytest.mark.parametrize("length", [0, 1, 3, MAX_LINE_FALLBACK_LENGTH])
def test_short_unstructured_input_is_a_line(length):
    """
    Up to four unpaired bases are drawn on a vertical line.
    """
    coords = RNALayout().layout([-1] * length)
    assert coords.xarray.tolist() == [0.0] * length
    assert coords.yarray.tolist() == [i * 45.0 for i in range(length)]


def test_long_unstructured_input_is_a_circle():
    """
    Longer unpaired sequences sit at equal distance from their centroid.
    """
    layout = RNALayout()
    coords = layout.layout([-1] * 10)
    assert layout.root is None

    points = np.column_stack([coords.xarray, coords.yarray])
    radii = np.hypot(*(points - points.mean(axis=0)).T)
    assert np.allclose(radii, radii[0])
    assert len({(round(x, 6), round(y, 6)) for x, y in points}) == 10


def test_pseudoknotted_pairs_are_not_drawn():
    """
    Crossing pairs are removed before layout; the nested part is drawn as if alone.
    """
    knotted = SecStruct.from_dot_bracket("(.[.).]", pseudoknots=True)
    nested = SecStruct.from_dot_bracket("(...)..")

    knotted_coords = RNALayout().layout(knotted)
    nested_coords = RNALayout().layout(nested)
    assert np.array_equal(knotted_coords.xarray, nested_coords.xarray)
    assert np.array_equal(knotted_coords.yarray, nested_coords.yarray)


def test_one_sided_pairing_list_is_symmetrised():
    """
    A pair recorded only on its 5' side is still drawn.
    """
    one_sided = RNALayout().layout([4, -1, -1, -1, -1])
    symmetric = RNALayout().layout(SecStruct.from_dot_bracket("(...)"))
    assert np.array_equal(one_sided.xarray, symmetric.xarray)
    assert np.array_equal(one_sided.yarray, symmetric.yarray)


def test_conflicting_one_sided_entries_are_rejected():
    """
    Two entries claiming the same base cannot both be symmetrised.
    """
    with pytest.raises(LayoutStructureError):
        RNALayout().layout([2, 2, -1])


def test_setup_tree_replaces_previous_tree():
    """
    A new `setup_tree` call discards the old tree and its placements.
    """
    layout = RNALayout()
    layout.layout(SecStruct.from_dot_bracket("((..))"))
    first_root = layout.root

    layout.setup_tree(SecStruct.from_dot_bracket("(..)"))
    assert layout.root is not first_root
    assert layout.placements == {}

    layout.setup_tree([-1, -1])
    assert layout.root is None


def test_output_length_can_differ_from_structure():
    """
    An explicit output length pads with `NaN` or truncates.
    """
    ss = SecStruct.from_dot_bracket("(...)")
    padded = RNALayout().layout(ss, length=7)
    assert padded.length == 7
    assert np.isnan(padded.xarray[5:]).all()


def test_negative_length_is_rejected():
    """
    A negative output length is a caller error.
    """
    with pytest.raises(ValueError):
        RNALayout().get_coords(-1)


def test_counter_clockwise_config_mirrors_layout():
    """
    Starting counter-clockwise mirrors the drawing across the y axis.
    """
    ss = SecStruct.from_dot_bracket("((..((...)).(..)..))")
    cw = RNALayout().layout(ss)
    ccw = RNALayout(config=LayoutConfig(rotation=RotationDirection.CCW)).layout(ss)
    np.testing.assert_allclose(ccw.xarray, -cw.xarray, atol=1e-9)
    np.testing.assert_allclose(ccw.yarray, cw.yarray, atol=1e-9)


def test_rotation_direction_sign():
    """
    Covered bases carry the configured sign; without a tree every base is +1.
    """
    layout = RNALayout(config=LayoutConfig(rotation="ccw"))
    layout.setup_tree(SecStruct.from_dot_bracket("(..)."))
    assert layout.get_rotation_direction_sign(5).tolist() == [-1] * 5

    layout.setup_tree([-1, -1, -1])
    assert layout.get_rotation_direction_sign(3).tolist() == [1, 1, 1]


def test_spacing_arguments():
    """
    Spacings passed directly build the config.
    """
    layout = RNALayout(primary_space=30, pair_space=20)
    assert layout.primary_space == 30.0
    assert layout.pair_space == 20.0
    assert layout.config.rotation is RotationDirection.CW
