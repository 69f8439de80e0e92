import pytest

from draftkit.config import ENVConfig


class DescribeENVConfig:
    """Unit-test suite for `draftkit.config.ENVConfig`."""

    def it_does_not_keep_block_trees_by_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("DRAFTKIT_TREE_DATA_SUPPORT", raising=False)
        assert ENVConfig().DRAFTKIT_TREE_DATA_SUPPORT is False

    @pytest.mark.parametrize(
        ("value", "expected_value"),
        [("true", True), ("True", True), ("1", True), ("t", True), ("false", False), ("0", False)],
    )
    def it_reads_tree_data_support_from_the_environment(
        self, value: str, expected_value: bool, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("DRAFTKIT_TREE_DATA_SUPPORT", value)
        assert ENVConfig().DRAFTKIT_TREE_DATA_SUPPORT is expected_value

    def it_reads_the_log_level_from_the_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert ENVConfig().LOG_LEVEL == "DEBUG"

    def and_it_defaults_the_log_level_to_warning(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert ENVConfig().LOG_LEVEL == "WARNING"
