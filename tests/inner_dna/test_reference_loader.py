import copy

import pytest
import yaml
from pathlib import Path
from pydantic import ValidationError

from services.inner_dna_engine.loader import (
    ReferenceDataError,
    default_reference_bank,
    default_reference_bank_data,
    load_reference_bank,
    load_reference_bank_from_file,
)
from services.inner_dna_engine.models import Instinct, PersonalityType, StateCode


# Helper function to create temporary YAML files for testing
def create_temp_yaml(tmp_path: Path, filename: str, content: dict):
    """Creates a temporary YAML file in the specified path."""
    filepath = tmp_path / filename
    with open(filepath, 'w') as f:
        yaml.dump(content, f)
    return str(filepath)


@pytest.fixture
def bank_data():
    """A deep copy of the built-in bank data that tests may freely break."""
    return copy.deepcopy(default_reference_bank_data())


# --- Built-in bank ---

def test_default_bank_shape(bank):
    assert len(bank.screener_questions) == 36
    assert len(bank.general_scenarios) == 15
    assert all(len(s.options) == 9 for s in bank.general_scenarios)
    assert len(bank.targeted_scenarios) == 9
    assert len(bank.wing_sets) == 9
    assert len(bank.triads) == 10
    assert [b.id for b in bank.battles] == [1, 2, 3]


def test_default_bank_is_cached():
    assert default_reference_bank() is default_reference_bank()


def test_category_mapping_is_a_bijection(bank):
    assert len(bank.category_to_type) == 9
    assert set(bank.category_to_type.values()) == set(PersonalityType)
    assert bank.category_to_type["A"] == PersonalityType.PEACEMAKER
    assert bank.category_to_type["G"] == PersonalityType.CHALLENGER


def test_wing_pairs_are_neighbours(bank):
    assert (bank.wing_set(1).wing_a, bank.wing_set(1).wing_b) == (9, 2)
    assert (bank.wing_set(9).wing_a, bank.wing_set(9).wing_b) == (8, 1)
    assert (bank.wing_set(5).wing_a, bank.wing_set(5).wing_b) == (4, 6)


def test_every_state_sits_in_six_triads(bank):
    for code in StateCode:
        assert sum(1 for t in bank.triads if code in t.states) == 6


def test_battles_cover_each_instinct_pair(bank):
    battle = bank.battle(2)
    assert (battle.left, battle.right) == (Instinct.SELF_PRESERVATION, Instinct.SOCIAL)
    assert battle.opponent_of(Instinct.SOCIAL) == Instinct.SELF_PRESERVATION


def test_lookups_return_none_for_unknown_ids(bank):
    assert bank.screener_question(37) is None
    assert bank.scenario("nope") is None
    assert bank.triad(11) is None
    assert bank.battle(4) is None


# --- Validation ---

def test_missing_screener_question_is_rejected(bank_data):
    bank_data["screener_questions"] = bank_data["screener_questions"][:-1]
    with pytest.raises(ReferenceDataError, match="numbered 1..36"):
        load_reference_bank(bank_data)


def test_duplicate_scenario_id_is_rejected(bank_data):
    bank_data["general_scenarios"][1]["id"] = bank_data["general_scenarios"][0]["id"]
    with pytest.raises(ReferenceDataError, match="Duplicate scenario ID"):
        load_reference_bank(bank_data)


def test_general_scenario_must_cover_all_types(bank_data):
    bank_data["general_scenarios"][0]["options"] = bank_data["general_scenarios"][0]["options"][:8]
    with pytest.raises(ReferenceDataError, match="one option per type"):
        load_reference_bank(bank_data)


def test_wrong_wing_pair_is_rejected(bank_data):
    bank_data["wing_sets"][0]["wing_b"] = 3
    with pytest.raises(ReferenceDataError, match="neighbours"):
        load_reference_bank(bank_data)


def test_duplicate_triad_is_rejected(bank_data):
    bank_data["triads"][1]["states"] = list(bank_data["triads"][0]["states"])
    with pytest.raises(ReferenceDataError):
        load_reference_bank(bank_data)


def test_battles_must_cover_every_pair(bank_data):
    bank_data["battles"][2]["left"] = "sp"
    bank_data["battles"][2]["right"] = "sx"
    with pytest.raises(ReferenceDataError, match="every pair"):
        load_reference_bank(bank_data)


def test_option_confidence_out_of_range_fails_schema(bank_data):
    bank_data["general_scenarios"][0]["options"][0]["confidence"] = 1.5
    with pytest.raises(ValidationError):
        load_reference_bank(bank_data)


def test_unknown_state_code_fails_schema(bank_data):
    bank_data["states"][0]["code"] = "PNK"
    with pytest.raises(ValidationError):
        load_reference_bank(bank_data)


# --- YAML files ---

def test_load_from_yaml_file(tmp_path, bank_data):
    bank_data["version"] = "9.9.9"
    path = create_temp_yaml(tmp_path, "bank.yml", bank_data)
    loaded = load_reference_bank_from_file(path)
    assert loaded.version == "9.9.9"
    assert loaded.screener_question(14).category_a == bank_data["screener_questions"][13]["category_a"]


def test_load_missing_file(tmp_path):
    with pytest.raises(ReferenceDataError, match="File not found"):
        load_reference_bank_from_file(str(tmp_path / "missing.yml"))


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    with pytest.raises(ReferenceDataError, match="empty or invalid"):
        load_reference_bank_from_file(str(path))


def test_load_malformed_yaml(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("version: [unclosed")
    with pytest.raises(ReferenceDataError, match="Error parsing YAML"):
        load_reference_bank_from_file(str(path))
