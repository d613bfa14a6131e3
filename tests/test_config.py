"""Tests for stepwise.lib.config module."""

from stepwise.lib.config import EngineOptions, load_engine_options


class TestLoadEngineOptions:
    """Tests for load_engine_options()."""

    def test_none_path_returns_defaults(self):
        assert load_engine_options(None) == EngineOptions()

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_engine_options(tmp_path / "stepwise.yaml") == EngineOptions()

    def test_overrides(self, tmp_path):
        path = tmp_path / "stepwise.yaml"
        path.write_text("engine:\n  max_steps: 20\n  author: platform-team\n")
        options = load_engine_options(path)
        assert options.max_steps == 20
        assert options.author == "platform-team"
        assert options.min_complexity == 1
        assert options.max_complexity == 5

    def test_invalid_yaml_defaults_with_warning(self, tmp_path, caplog):
        path = tmp_path / "stepwise.yaml"
        path.write_text("engine: [unclosed\n")
        assert load_engine_options(path) == EngineOptions()
        assert "Failed to parse" in caplog.text

    def test_invalid_value_defaults_with_warning(self, tmp_path, caplog):
        path = tmp_path / "stepwise.yaml"
        path.write_text("engine:\n  max_steps: lots\n")
        assert load_engine_options(path).max_steps == 50
        assert "Invalid max_steps 'lots'" in caplog.text

    def test_inverted_complexity_range(self, tmp_path, caplog):
        path = tmp_path / "stepwise.yaml"
        path.write_text("engine:\n  min_complexity: 4\n  max_complexity: 2\n")
        options = load_engine_options(path)
        assert (options.min_complexity, options.max_complexity) == (1, 5)
        assert "exceeds max_complexity" in caplog.text

    def test_unknown_key_warns(self, tmp_path, caplog):
        path = tmp_path / "stepwise.yaml"
        path.write_text("engine:\n  dry_run: true\n")
        assert load_engine_options(path) == EngineOptions()
        assert "Unknown engine option 'dry_run'" in caplog.text

    def test_empty_file(self, tmp_path):
        path = tmp_path / "stepwise.yaml"
        path.write_text("")
        assert load_engine_options(path) == EngineOptions()
