"""Tests for presets: normalisation, theme loading, the catalog and the
SQLite-backed user preset repository."""

from __future__ import annotations

import json

import pytest

from pacekeeper.database.db import get_session
from pacekeeper.database.models import Preset, PresetStep, utc_now
from pacekeeper.presets.builtin import DEFAULT_PRESET_DATA, DEFAULT_THEME_CONFIG
from pacekeeper.presets.catalog import (
    PresetCatalog,
    builtin_key,
    custom_key,
    custom_name,
)
from pacekeeper.presets.repository import PresetError, SqlPresetRepository, validate_preset
from pacekeeper.presets.themes import (
    DATA_DIR,
    FALLBACK_PRESET_MAP,
    Theme,
    load_theme_presets,
    load_themes_metadata,
    normalize_builtin_preset_data,
    normalize_preset_entries,
    normalize_theme_metadata,
)
from pacekeeper.timer.models import Step


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def repo():
    return SqlPresetRepository()


@pytest.fixture
def data_dir(tmp_path):
    """A theme directory with one file-backed and one inline theme."""
    write_json(tmp_path / "themes.json", {
        "defaultThemeId": "gym",
        "themes": [
            {"id": "gym", "name": "Gym", "description": "Sets", "usage": "Daily", "file": "gym.json"},
            {"id": "inline", "name": "Inline", "presets": [
                {"name": "Quick", "steps": [{"name": "Go", "seconds": 5}]},
            ]},
        ],
    })
    write_json(tmp_path / "gym.json", [
        {"name": "Push", "steps": [{"name": "Push-ups", "seconds": 30}, {"name": "Rest", "seconds": 15}]},
        {"name": "Pull", "steps": [{"name": "Rows", "seconds": 40}]},
    ])
    return tmp_path


# ═══════════════════════════════════════════════════════════════════════
#  NORMALISATION
# ═══════════════════════════════════════════════════════════════════════


class TestNormalizeEntries:

    def test_basic(self):
        result = normalize_preset_entries([
            {"name": "A", "steps": [{"name": "one", "seconds": 10}, {"name": "two", "seconds": "5"}]},
        ])
        assert result == {"A": [Step("one", 10), Step("two", 5)]}

    def test_drops_unnamed_and_empty(self):
        result = normalize_preset_entries([
            {"name": "", "steps": [{"name": "x", "seconds": 1}]},
            {"name": "  ", "steps": [{"name": "x", "seconds": 1}]},
            {"name": "Empty", "steps": []},
            {"name": "Blank steps", "steps": [{"name": " ", "seconds": 3}, "junk"]},
            "not a dict",
        ])
        assert result == {}

    def test_trims_names_and_coerces_seconds(self):
        result = normalize_preset_entries([
            {"name": " Tea ", "steps": [{"name": " Steep ", "seconds": -4}, {"name": "Pour"}]},
        ])
        assert result == {"Tea": [Step("Steep", 0), Step("Pour", 0)]}

    def test_later_duplicate_wins(self):
        result = normalize_preset_entries([
            {"name": "A", "steps": [{"name": "old", "seconds": 1}]},
            {"name": "A", "steps": [{"name": "new", "seconds": 2}]},
        ])
        assert result == {"A": [Step("new", 2)]}

    def test_non_list_input(self):
        assert normalize_preset_entries({"name": "A"}) == {}
        assert normalize_preset_entries(None) == {}


class TestNormalizeBuiltinData:

    ENTRY = {"name": "A", "steps": [{"name": "x", "seconds": 3}]}

    def test_list_shape(self):
        assert normalize_builtin_preset_data([self.ENTRY]) == {"A": [Step("x", 3)]}

    def test_aggregated_shape(self):
        raw = {
            "exercise": [self.ENTRY],
            "tea": [{"name": "B", "steps": [{"name": "y", "seconds": 4}]}],
        }
        assert list(normalize_builtin_preset_data(raw)) == ["A", "B"]

    def test_presets_key_shape(self):
        raw = {"presets": [self.ENTRY]}
        assert normalize_builtin_preset_data(raw) == {"A": [Step("x", 3)]}

    def test_name_to_steps_mapping(self):
        raw = {"A": [{"name": "x", "seconds": 3}], "B": [{"name": "y", "seconds": 1}]}
        result = normalize_builtin_preset_data(raw)
        assert result == {"A": [Step("x", 3)], "B": [Step("y", 1)]}

    def test_fallback_when_nothing_usable(self):
        fallback = {"F": [Step("f", 1)]}
        assert normalize_builtin_preset_data("garbage", fallback) == fallback
        assert normalize_builtin_preset_data([], fallback) == fallback
        assert normalize_builtin_preset_data({}, None) == {}

    def test_fallback_is_copied(self):
        fallback = {"F": [Step("f", 1)]}
        result = normalize_builtin_preset_data(None, fallback)
        result["G"] = []
        assert "G" not in fallback


class TestNormalizeThemeMetadata:

    def test_valid(self):
        meta = normalize_theme_metadata({
            "defaultThemeId": "b",
            "themes": [{"id": "a", "file": "a.json"}, {"id": "b", "name": "Bee", "file": "b.json"}],
        })
        assert [t.id for t in meta.themes] == ["a", "b"]
        assert meta.themes[0].name == "a"
        assert meta.default_theme_id == "b"

    def test_missing_ids_are_generated(self):
        meta = normalize_theme_metadata({"themes": [{"name": "First"}, {"file": "x.json"}]})
        assert [t.id for t in meta.themes] == ["theme_1", "theme_2"]

    def test_theme_without_file_falls_back(self):
        meta = normalize_theme_metadata({"themes": [{"id": "a"}, {"id": "b", "file": "b.json"}]})
        assert meta.themes[0].fallback is True
        assert meta.themes[1].fallback is False

    def test_empty_uses_default_config(self):
        meta = normalize_theme_metadata({"themes": []})
        assert [t.id for t in meta.themes] == [DEFAULT_THEME_CONFIG["themes"][0]["id"]]

    def test_non_dict_uses_default_config(self):
        meta = normalize_theme_metadata(["nope"])
        assert len(meta.themes) == len(DEFAULT_THEME_CONFIG["themes"])

    def test_resolve_default_id(self):
        meta = normalize_theme_metadata({
            "defaultThemeId": "b",
            "themes": [{"id": "a", "file": "a.json"}, {"id": "b", "file": "b.json"}],
        })
        assert meta.resolve_default_id("a") == "a"
        assert meta.resolve_default_id("zzz") == "b"
        assert meta.resolve_default_id() == "b"

    def test_resolve_default_id_unknown_declared_default(self):
        meta = normalize_theme_metadata({
            "defaultThemeId": "missing",
            "themes": [{"id": "a", "file": "a.json"}],
        })
        assert meta.resolve_default_id() == "a"

    def test_tooltip(self):
        assert Theme("a", "A", description="Desc", usage="Use").tooltip == "Desc | Use"
        assert Theme("a", "A", usage="Use").tooltip == "Use"
        assert Theme("a", "A").tooltip == ""


# ═══════════════════════════════════════════════════════════════════════
#  LOADING
# ═══════════════════════════════════════════════════════════════════════


class TestLoading:

    def test_fallback_map_built_from_defaults(self):
        assert len(FALLBACK_PRESET_MAP) == len(DEFAULT_PRESET_DATA)
        assert all(steps for steps in FALLBACK_PRESET_MAP.values())

    def test_bundled_themes(self):
        meta = load_themes_metadata()
        assert {t.id for t in meta.themes} >= {"daily", "tea"}
        for theme in meta.themes:
            presets = load_theme_presets(theme)
            assert presets
            assert all(steps for steps in presets.values())

    def test_bundled_data_dir_exists(self):
        assert (DATA_DIR / "themes.json").exists()

    def test_load_from_custom_dir(self, data_dir):
        meta = load_themes_metadata(data_dir)
        assert meta.default_theme_id == "gym"
        presets = load_theme_presets(meta.get("gym"), data_dir)
        assert list(presets) == ["Push", "Pull"]
        assert presets["Push"] == [Step("Push-ups", 30), Step("Rest", 15)]

    def test_inline_presets(self, data_dir):
        meta = load_themes_metadata(data_dir)
        assert load_theme_presets(meta.get("inline"), data_dir) == {"Quick": [Step("Go", 5)]}

    def test_missing_themes_file_uses_default_config(self, tmp_path):
        meta = load_themes_metadata(tmp_path)
        assert [t.id for t in meta.themes] == [DEFAULT_THEME_CONFIG["themes"][0]["id"]]

    def test_invalid_themes_json_uses_default_config(self, tmp_path):
        (tmp_path / "themes.json").write_text("{not json", encoding="utf-8")
        meta = load_themes_metadata(tmp_path)
        assert meta.themes[0].id == DEFAULT_THEME_CONFIG["themes"][0]["id"]

    def test_missing_theme_file_uses_fallback(self, tmp_path):
        theme = Theme("x", "X", file="missing.json")
        assert load_theme_presets(theme, tmp_path) == FALLBACK_PRESET_MAP

    def test_empty_theme_file_uses_fallback(self, tmp_path):
        write_json(tmp_path / "empty.json", [])
        theme = Theme("x", "X", file="empty.json")
        assert load_theme_presets(theme, tmp_path) == FALLBACK_PRESET_MAP

    def test_no_theme_uses_fallback(self):
        assert load_theme_presets(None) == FALLBACK_PRESET_MAP


# ═══════════════════════════════════════════════════════════════════════
#  REPOSITORY
# ═══════════════════════════════════════════════════════════════════════


class TestValidatePreset:

    def test_strips_name(self):
        name, steps = validate_preset("  Mine  ", [Step("a", 1)])
        assert name == "Mine"
        assert steps == [Step("a", 1)]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name):
        with pytest.raises(PresetError):
            validate_preset(name, [Step("a", 1)])

    def test_no_steps_rejected(self):
        with pytest.raises(PresetError):
            validate_preset("Mine", [])

    def test_error_is_value_error(self):
        assert issubclass(PresetError, ValueError)


class TestSqlPresetRepository:

    def test_empty(self, repo):
        assert repo.list() == []
        assert repo.get("nothing") is None

    def test_save_and_get(self, repo):
        repo.save("Stretch", [Step("Neck", 60), Step("Back", 45)])
        assert repo.get("Stretch") == [Step("Neck", 60), Step("Back", 45)]

    def test_save_strips_name(self, repo):
        repo.save("  Stretch ", [Step("Neck", 60)])
        assert repo.list() == ["Stretch"]

    def test_list_in_insertion_order(self, repo):
        for name in ("Zeta", "Alpha", "Mid"):
            repo.save(name, [Step("x", 1)])
        assert repo.list() == ["Zeta", "Alpha", "Mid"]

    def test_save_replaces_existing(self, repo):
        repo.save("Mine", [Step("a", 1), Step("b", 2), Step("c", 3)])
        repo.save("Mine", [Step("z", 9)])
        assert repo.get("Mine") == [Step("z", 9)]
        assert repo.list() == ["Mine"]
        with get_session() as db:
            assert db.query(PresetStep).count() == 1

    def test_step_order_preserved(self, repo):
        steps = [Step(f"s{i}", i) for i in range(8)]
        repo.save("Ordered", steps)
        assert repo.get("Ordered") == steps

    def test_delete(self, repo):
        repo.save("Gone", [Step("a", 1)])
        assert repo.delete("Gone") is True
        assert repo.get("Gone") is None
        assert repo.list() == []
        with get_session() as db:
            assert db.query(PresetStep).count() == 0

    def test_delete_unknown(self, repo):
        assert repo.delete("never") is False

    def test_save_invalid_raises_and_stores_nothing(self, repo):
        with pytest.raises(PresetError):
            repo.save("", [Step("a", 1)])
        with pytest.raises(PresetError):
            repo.save("Empty", [])
        with get_session() as db:
            assert db.query(Preset).count() == 0

    def test_saving_updates_timestamp(self, repo):
        repo.save("Mine", [Step("a", 1)])
        with get_session() as db:
            first = db.query(Preset).filter_by(name="Mine").one().updated_at
        repo.save("Mine", [Step("b", 2)])
        with get_session() as db:
            second = db.query(Preset).filter_by(name="Mine").one().updated_at
        assert second >= first

    def test_timestamps_are_utc(self, repo):
        assert utc_now().utcoffset().total_seconds() == 0
        before = utc_now().replace(tzinfo=None)
        repo.save("Mine", [Step("a", 1)])
        with get_session() as db:
            preset = db.query(Preset).filter_by(name="Mine").one()
            stamps = (preset.created_at, preset.updated_at)
        after = utc_now().replace(tzinfo=None)
        for stamp in stamps:
            assert before <= stamp.replace(tzinfo=None) <= after


# ═══════════════════════════════════════════════════════════════════════
#  CATALOG
# ═══════════════════════════════════════════════════════════════════════


class TestKeys:

    def test_round_trip(self):
        assert builtin_key("Tea") == "builtin::Tea"
        assert custom_key("Mine") == "custom::Mine"
        assert custom_name(custom_key("Mine")) == "Mine"

    def test_custom_name_of_other_keys(self):
        assert custom_name(builtin_key("Tea")) is None
        assert custom_name("") is None


class TestPresetCatalog:

    def test_themes_and_default(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        assert [t.id for t in catalog.themes] == ["gym", "inline"]
        assert catalog.default_theme_id() == "gym"
        assert catalog.default_theme_id("inline") == "inline"

    def test_switch_theme_loads_builtins(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        assert catalog.switch_theme("gym") is True
        assert catalog.current_theme_id == "gym"
        assert list(catalog.builtin_presets) == ["Push", "Pull"]

    def test_switch_to_current_theme_is_noop(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        catalog.switch_theme("gym")
        assert catalog.switch_theme("gym") is False
        assert catalog.switch_theme("gym", force=True) is True

    def test_unknown_theme_uses_fallback(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        assert catalog.switch_theme("nope") is True
        assert catalog.current_theme_id == "default"
        assert catalog.builtin_presets == FALLBACK_PRESET_MAP

    def test_choices_builtin_then_custom(self, repo, data_dir):
        repo.save("Mine", [Step("a", 1)])
        catalog = PresetCatalog(repo, data_dir=data_dir)
        catalog.switch_theme("gym")
        choices = catalog.choices()
        assert [c.key for c in choices] == [
            "builtin::Push", "builtin::Pull", "custom::Mine",
        ]
        assert [c.custom for c in choices] == [False, False, True]
        assert catalog.default_key() == "builtin::Push"

    def test_custom_may_share_builtin_name(self, repo, data_dir):
        repo.save("Push", [Step("My push", 10)])
        catalog = PresetCatalog(repo, data_dir=data_dir)
        catalog.switch_theme("gym")
        assert catalog.resolve("builtin::Push")[1][0] == Step("Push-ups", 30)
        assert catalog.resolve("custom::Push") == ("Push", [Step("My push", 10)])

    def test_resolve(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        catalog.switch_theme("gym")
        assert catalog.resolve("builtin::Pull") == ("Pull", [Step("Rows", 40)])
        assert catalog.resolve("builtin::Missing") == ("Missing", [])
        assert catalog.resolve("custom::Missing") == ("Missing", [])
        assert catalog.resolve("") == ("", [])
        assert catalog.resolve("weird") == ("", [])

    def test_resolve_returns_copy(self, repo, data_dir):
        catalog = PresetCatalog(repo, data_dir=data_dir)
        catalog.switch_theme("gym")
        _name, steps = catalog.resolve("builtin::Pull")
        steps.append(Step("extra", 1))
        assert catalog.resolve("builtin::Pull")[1] == [Step("Rows", 40)]

    def test_bundled_catalog(self, repo):
        catalog = PresetCatalog(repo)
        catalog.switch_theme(catalog.default_theme_id())
        assert catalog.current_theme_id == "daily"
        assert catalog.choices()
        name, steps = catalog.resolve(catalog.default_key())
        assert name
        assert steps
