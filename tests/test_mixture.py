"""Tests for mixtures and the composition helpers shared by every substance kind."""

from decimal import Decimal

import pytest

from materia.core.enums import PhaseType
from materia.core.proportions import is_normalized
from materia.substances.mixture import Mixture
from materia.substances.registry import get_substance
from materia.substances.substance import NONE, Solution, Substance


@pytest.fixture
def brine(water, salt):
    return Mixture([(water, 1), (salt, 1)])


class TestMixtureConstruction:
    """Test constituent coercion and defaults."""

    def test_normalizes(self, brine, water, salt):
        assert dict(brine.constituents) == {water.reference: Decimal("0.5"), salt.reference: Decimal("0.5")}

    def test_bare_items_share_equally(self, water, salt, iron):
        mix = Mixture([water, salt, iron, iron])
        assert mix.proportion_of(iron) == Decimal(2) / Decimal(4)

    def test_mapping_and_keys(self, water):
        mix = Mixture({"water": "0.3", "iron": "0.7"})
        assert mix.proportion_of(water) == Decimal("0.3")

    def test_generated_identity(self, brine):
        assert len(brine.key) == 32
        assert brine.name == "Water:50.000%; Sodium Chloride:50.000%"

    def test_key_equality(self, water, salt):
        a = Mixture([(water, 1)], key="shared")
        b = Mixture([(salt, 1)], key="shared")
        assert a == b
        assert Mixture([(water, 1)]) != Mixture([(water, 1)])

    def test_rejects_bad_constituents(self):
        with pytest.raises(TypeError):
            Mixture(42)

    def test_empty(self):
        assert Mixture.EMPTY.is_empty
        assert Mixture.EMPTY.phase(300.0, 101.325) == PhaseType.NONE


class TestMixtureProperties:
    """Test properties derived from constituents."""

    def test_phase_is_union(self, brine):
        assert brine.phase(300.0, 101.325) == PhaseType.SOLID | PhaseType.LIQUID

    def test_weighted_density(self, brine):
        assert brine.density(300.0, 101.325) == pytest.approx(0.5 * 997 + 0.5 * 2170)

    def test_stored_density_when_phase_dominates(self, water, salt):
        mostly_salt = Mixture([(water, "0.2"), (salt, "0.8")], density_solid=2000.0)
        assert mostly_salt.density(300.0, 101.325) == 2000.0

        mostly_water = Mixture([(water, "0.8"), (salt, "0.2")], density_solid=2000.0)
        assert mostly_water.density(300.0, 101.325) == pytest.approx(0.8 * 997 + 0.2 * 2170)

    def test_flags(self, water, iron):
        uranium = get_substance("uranium")
        mix = Mixture([(water, "0.9"), (uranium, "0.1")])
        assert mix.is_radioactive
        assert mix.is_metal
        assert not Mixture([water, water.with_name("Other")]).is_metal

    def test_weighted_values(self, water, salt):
        mix = Mixture([(water, "0.5"), (salt, "0.5")])
        assert mix.hardness == pytest.approx(0.5 * 8 + 0.5 * 20)
        assert mix.molar_mass == pytest.approx(0.5 * water.molar_mass + 0.5 * salt.molar_mass)
        assert mix.youngs_modulus == pytest.approx(0.5 * 39.98)

    def test_homogenized_solution(self, brine):
        solution = brine.homogenized()
        assert isinstance(solution, Solution)
        assert dict(solution.constituents) == dict(brine.constituents)


class TestMixtureEditing:
    """Test combine and remove on aggregates."""

    def test_combine_folds_aggregates(self, brine, water, salt, iron):
        result = brine.combine(iron, "0.5")
        assert dict(result.constituents) == {
            water.reference: Decimal("0.25"),
            salt.reference: Decimal("0.25"),
            iron.reference: Decimal("0.5"),
        }

    def test_combine_two_mixtures(self, brine, water, salt, iron, silica):
        rock = Mixture([(iron, 1), (silica, 1)])
        result = brine.combine(rock, "0.5")
        assert len(result.constituents) == 4
        assert all(ref.substance.is_leaf for ref in result.constituents)

    @pytest.mark.parametrize("proportion", ["0.1", "0.333", "0.5", "0.9"])
    def test_combine_stays_normalized(self, brine, iron, proportion):
        assert is_normalized(brine.combine(iron, proportion).constituents)

    def test_combine_short_circuits(self, brine, iron):
        assert brine.combine(iron, 1) is iron
        assert brine.combine(iron, 0) is brine

    def test_remove(self, brine, water, salt):
        fresh = brine.remove(salt)
        assert fresh.proportion_of(water) == Decimal(1)
        assert fresh.remove(water) is NONE
        assert brine.remove(get_substance("iron")) is brine

    def test_remove_itself(self, brine):
        assert brine.remove(brine) is NONE

    def test_remove_recurses(self, water, salt, iron):
        mix = Mixture([(get_substance("seawater"), 1), (iron, 1)])
        result = mix.remove(salt)
        assert result.proportion_of(salt) == 0
        assert is_normalized(result.constituents)

    def test_with_name_keeps_key(self, brine):
        renamed = brine.with_name("Brine")
        assert renamed.name == "Brine"
        assert renamed == brine


class TestProportionQueries:
    """Test proportion_of, contains and homogenize."""

    def test_nested_proportion(self, water, salt, iron):
        mix = Mixture([(get_substance("seawater"), 1), (iron, 1)])
        assert mix.proportion_of(salt) == Decimal("0.0175")
        assert mix.proportion_of(water) == Decimal("0.4825")

    def test_predicate(self, brine):
        assert brine.proportion_of(lambda s: s.is_conductive) == Decimal("0.5")

    def test_contains(self, brine, water, iron):
        assert brine.contains(water)
        assert not brine.contains(iron)
        assert brine.contains(water, 300.0, 101.325, PhaseType.LIQUID)
        assert not brine.contains(water, 300.0, 101.325, PhaseType.GAS)

    def test_homogenize(self, water, salt, iron):
        mix = Mixture([(get_substance("seawater"), 1), (iron, 1)])
        assert mix.homogenize() == {
            water.reference: Decimal("0.4825"),
            salt.reference: Decimal("0.0175"),
            iron.reference: Decimal("0.5"),
        }

    def test_homogenize_is_idempotent(self, iron):
        mix = Mixture([(get_substance("seawater"), 1), (get_substance("carbon_steel"), 1), (iron, 2)])
        flat = mix.homogenize()
        assert Mixture(flat).homogenize() == flat

    def test_chemical_constituents(self, protein, water):
        mix = Mixture([(protein, 1), (water, 1)])
        assert mix.chemical_constituents() == [water]


class TestSeparateByPhase:
    """Test phase buckets."""

    def test_buckets(self, brine, water, salt):
        solid, liquid, gas, rest = brine.separate_by_phase(300.0, 101.325, PhaseType.SOLID, PhaseType.LIQUID, PhaseType.GAS)
        assert solid == ([salt.reference], Decimal("0.5"))
        assert liquid == ([water.reference], Decimal("0.5"))
        assert gas == ([], Decimal(0))
        assert rest == ([], Decimal(0))

    def test_unmatched(self, brine):
        (liquid, share), (rest, rest_share) = brine.separate_by_phase(300.0, 101.325, PhaseType.LIQUID)
        assert share == Decimal("0.5")
        assert rest_share == Decimal("0.5")
        assert len(rest) == 1

    def test_no_phases_gives_everything(self, brine):
        assert brine.separate_by_phase(300.0, 101.325) == [(list(brine.constituents), Decimal(1))]

    def test_multi_phase_constituent_counted_twice(self, water):
        slush = Substance(name="Slush", fixed_phase="solid|liquid")
        mix = Mixture([(slush, 1), (water, 1)])
        solid, liquid, rest = mix.separate_by_phase(300.0, 101.325, PhaseType.SOLID, PhaseType.LIQUID)
        assert solid[1] == Decimal("0.5")
        assert liquid[1] == Decimal(1)
        assert solid[1] + liquid[1] > 1
