"""
CLI interface tests for dep-grouper.
Tests the command-line interface and main entry points.
"""

import json

from click.testing import CliRunner
from unittest.mock import patch

from src.dep_grouper.main import cli


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "dep-grouper" in result.output.lower()

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_info_command(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "update-types" in result.output


class TestAssignCommand:
    """Test the assign command."""

    def test_assign_console_output(self, sample_job_yaml):
        runner = CliRunner()
        result = runner.invoke(cli, ["assign", str(sample_job_yaml)])

        assert result.exit_code == 0
        assert "test-tools" in result.output
        assert "pytest-cov" in result.output
        assert "No dependencies matched" in result.output

    def test_assign_json_output(self, sample_job_json):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["assign", str(sample_job_json), "--output-format", "json"]
        )

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["summary"] == {
            "groups": 3,
            "empty_groups": 1,
            "ungrouped_dependencies": 4,
        }
        web = next(g for g in report["groups"] if g["name"] == "web")
        assert web["targets_highest_versions_possible"] is False
        assert [d["name"] for d in web["dependencies"]] == ["requests", "Django"]

    def test_assign_json_output_file(self, sample_job_json, temp_dir):
        output_file = temp_dir / "groups.json"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "assign",
                str(sample_job_json),
                "--format",
                "json",
                "--output-file",
                str(output_file),
            ],
        )

        assert result.exit_code == 0
        report = json.loads(output_file.read_text())
        assert [d["name"] for d in report["ungrouped_dependencies"]] == [
            "django-debug-toolbar",
            "numpy",
            "requests",
            "Django",
        ]

    def test_assign_quiet(self, sample_job_yaml):
        runner = CliRunner()
        result = runner.invoke(cli, ["assign", str(sample_job_yaml), "--quiet"])

        assert result.exit_code == 0
        assert "3 groups, 4 grouped, 4 individual updates" in result.output

    def test_assign_hide_empty_groups(self, sample_job_yaml):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["assign", str(sample_job_yaml), "--hide-empty-groups"]
        )

        assert result.exit_code == 0
        assert "typos" not in result.output

    def test_assign_nonexistent_file(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["assign", "nonexistent.yaml"])

        assert result.exit_code != 0

    def test_assign_invalid_job_file(self, temp_dir):
        job_file = temp_dir / "job.json"
        job_file.write_text(json.dumps({"dependency-groups": {"name": "oops"}}))

        runner = CliRunner()
        result = runner.invoke(cli, ["assign", str(job_file)])

        assert result.exit_code == 1
        assert "Failed to parse job file" in result.output

    def test_assign_invalid_rules(self, temp_dir):
        job_file = temp_dir / "job.json"
        job_file.write_text(
            json.dumps(
                {
                    "dependency-groups": [
                        {"name": "bad", "rules": {"update-types": ["huge"]}}
                    ],
                    "dependencies": [{"name": "requests", "version": "2.31.0"}],
                }
            )
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["assign", str(job_file)])

        assert result.exit_code == 1
        assert "unknown update-types: huge" in result.output

    def test_output_format_from_environment(self, sample_job_json, monkeypatch):
        monkeypatch.setenv("DEP_GROUPER_OUTPUT_FORMAT", "json")

        runner = CliRunner()
        result = runner.invoke(cli, ["assign", str(sample_job_json)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["groups"] == 3

    @patch("src.dep_grouper.main.output_json_results")
    def test_assign_dispatches_json(self, mock_output, sample_job_json):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["assign", str(sample_job_json), "--output-format", "json"]
        )

        assert result.exit_code == 0
        mock_output.assert_called_once()


class TestConfigCommands:
    """Test configuration management commands."""

    def test_config_init(self, tmp_path):
        config_path = tmp_path / "config.json"
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init", "--path", str(config_path)])

        assert result.exit_code == 0
        assert json.loads(config_path.read_text())["output"]["output_format"] == "console"

    def test_config_init_does_not_overwrite(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{}")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init", "--path", str(config_path)])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert config_path.read_text() == "{}"

    def test_config_show(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "Output Format: console" in result.output

    def test_config_validate(self, tmp_path):
        valid = tmp_path / "valid.yaml"
        valid.write_text("output:\n  output_format: json\n")
        invalid = tmp_path / "invalid.json"
        invalid.write_text(json.dumps({"logging": {"log_level": "LOUD"}}))

        runner = CliRunner()
        assert runner.invoke(cli, ["config", "validate", str(valid)]).exit_code == 0

        result = runner.invoke(cli, ["config", "validate", str(invalid)])
        assert result.exit_code == 1
        assert "logging.log_level" in result.output
