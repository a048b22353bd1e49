"""Tests for task classification."""

import pytest

from snakemake_tasks.core.classification import (
    DEFAULT_RULES_FILE,
    classify,
    load_group_rules,
)
from snakemake_tasks.core.models import GroupRule, TaskGroup


@pytest.fixture
def default_rules():
    return load_group_rules()


class TestLoadGroupRules:
    """Tests for loading group rules from YAML."""

    def test_packaged_rules_exist(self):
        """Test the bundled rules file ships with the package."""
        assert DEFAULT_RULES_FILE.exists()

    def test_default_rules_order(self, default_rules):
        """Test build rules come before test rules."""
        assert [rule.group for rule in default_rules] == [TaskGroup.BUILD, TaskGroup.TEST]
        assert default_rules[0].keywords == ["build", "compile", "watch"]
        assert default_rules[1].keywords == ["test"]

    def test_custom_rules_file(self, group_rules_file):
        """Test loading a user-provided rules file."""
        rules = load_group_rules(group_rules_file)

        assert len(rules) == 1
        assert rules[0].group == TaskGroup.TEST
        assert rules[0].keywords == ["lint"]

    def test_missing_file(self, tmp_path):
        """Test a missing file yields no rules."""
        assert load_group_rules(tmp_path / "nope.yaml") == []

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML yields no rules."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("groups: [\n")

        assert load_group_rules(bad) == []

    def test_invalid_rule(self, tmp_path):
        """Test a schema violation yields no rules."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("groups:\n  - group: deploy\n    keywords: [ship]\n")

        assert load_group_rules(bad) == []

    def test_empty_file(self, tmp_path):
        """Test an empty file yields no rules."""
        empty = tmp_path / "empty.yaml"
        empty.write_text("")

        assert load_group_rules(empty) == []


class TestClassify:
    """Tests for the substring heuristic."""

    @pytest.mark.parametrize("name", ["build_all", "compile", "watch_docs", "prebuild"])
    def test_build_names(self, default_rules, name):
        """Test build, compile and watch classify as build."""
        assert classify(name, default_rules) == TaskGroup.BUILD

    @pytest.mark.parametrize("name", ["run_tests", "test", "unittest"])
    def test_test_names(self, default_rules, name):
        """Test names containing 'test' classify as test."""
        assert classify(name, default_rules) == TaskGroup.TEST

    @pytest.mark.parametrize("name", ["cleanup", "all", "report"])
    def test_other_names(self, default_rules, name):
        """Test names matching nothing classify as none."""
        assert classify(name, default_rules) == TaskGroup.NONE

    def test_build_wins_over_test(self, default_rules):
        """Test a name matching both groups is build."""
        assert classify("buildtest", default_rules) == TaskGroup.BUILD
        assert classify("test_compile", default_rules) == TaskGroup.BUILD

    def test_case_sensitive(self, default_rules):
        """Test matching is case-sensitive."""
        assert classify("BUILD", default_rules) == TaskGroup.NONE
        assert classify("RunTests", default_rules) == TaskGroup.NONE

    def test_rule_order_decides(self):
        """Test the first matching rule wins."""
        rules = [
            GroupRule(group="test", keywords=["test"]),
            GroupRule(group="build", keywords=["build"]),
        ]
        assert classify("buildtest", rules) == TaskGroup.TEST

    def test_no_rules(self):
        """Test everything is none without rules."""
        assert classify("build_all", []) == TaskGroup.NONE
