"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from k6endpoints.cli import cli

WIDGETS_SPEC = """
test.describe('Widgets', () => {
  test('Create widget', async ({ request }) => {
    const response = await request.post('/api/widgets', { data: {name:'foo'} });
    expect(response.status()).toBe(201);
  });
});
"""


@pytest.fixture
def project(tmp_path):
    """A project with one spec under tests/endpoint-tests."""
    tests_dir = tmp_path / "tests" / "endpoint-tests"
    tests_dir.mkdir(parents=True)
    (tests_dir / "widgets.spec.ts").write_text(WIDGETS_SPEC, encoding="utf-8")
    (tests_dir / "home.spec.ts").write_text("test('home', async ({ page }) => {});", encoding="utf-8")
    return tmp_path


def out_file(root, suffix):
    return root / "perf" / "k6" / "sources" / f"endpoints.byFeature.{suffix}"


class TestGenerate:
    """Test the generate command."""

    def test_writes_js(self, project):
        """Test the default run writes only the JS module."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(project)])

        assert result.exit_code == 0, result.output
        assert "Generated 1 endpoints across 1 features" in result.output
        assert out_file(project, "js").exists()
        assert not out_file(project, "json").exists()
        assert not out_file(project, "ts").exists()
        assert "Create widget" in out_file(project, "js").read_text(encoding="utf-8")

    def test_all_formats(self, project):
        """Test --all writes JSON and TS too."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(project), "--all"])

        assert result.exit_code == 0, result.output
        manifest = json.loads(out_file(project, "json").read_text(encoding="utf-8"))
        assert manifest == {
            "Widgets": [
                {
                    "name": "Create widget",
                    "method": "POST",
                    "url": "/api/widgets",
                    "expect": {"status": 201},
                    "body": "{name:'foo'}",
                }
            ]
        }
        assert out_file(project, "ts").exists()

    def test_warns_for_empty_spec(self, project):
        """Test that specs without endpoints produce a warning only."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(project)])
        assert result.exit_code == 0
        assert "no endpoints found" in result.output

    def test_reruns_identical(self, project):
        """Test that two runs produce byte-identical output."""
        runner = CliRunner()
        runner.invoke(cli, ["generate", "--root", str(project), "--all"])
        first = [out_file(project, s).read_bytes() for s in ("js", "json", "ts")]

        runner.invoke(cli, ["generate", "--root", str(project), "--all", "--workers", "3"])
        second = [out_file(project, s).read_bytes() for s in ("js", "json", "ts")]
        assert first == second

    def test_no_spec_files(self, tmp_path):
        """Test that an empty project warns and exits successfully."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(tmp_path)])

        assert result.exit_code == 0
        assert "No .ts spec files found" in result.output
        assert not (tmp_path / "perf").exists()

    def test_tests_dir_is_a_file(self, tmp_path):
        """Test that a tests path that is a file is an error."""
        (tmp_path / "specs").write_text("")
        result = CliRunner().invoke(cli, ["generate", "--root", str(tmp_path), "--tests-dir", "specs"])
        assert result.exit_code == 1

    def test_unwritable_output(self, project):
        """Test that an unwritable output directory is an error."""
        (project / "blocker").write_text("")
        result = CliRunner().invoke(
            cli, ["generate", "--root", str(project), "--out-dir", "blocker/out"]
        )
        assert result.exit_code == 1
        assert "Cannot write manifest" in result.output

    def test_settings_file(self, project):
        """Test that k6endpoints.yaml in the root is picked up."""
        (project / "k6endpoints.yaml").write_text("out_dir: generated\nwith_json: true\n")

        result = CliRunner().invoke(cli, ["generate", "--root", str(project)])
        assert result.exit_code == 0, result.output
        assert (project / "generated" / "endpoints.byFeature.json").exists()

    def test_invalid_settings_file(self, project):
        """Test that an invalid settings file is an error."""
        config = project / "broken.yaml"
        config.write_text("window: -5\n")

        result = CliRunner().invoke(cli, ["generate", "--root", str(project), "--config", str(config)])
        assert result.exit_code == 1

    def test_verbose_table(self, project):
        """Test that --verbose prints the feature table."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(project), "-v"])
        assert result.exit_code == 0, result.output
        assert "Endpoints by feature" in result.output
        assert "Widgets" in result.output

    def test_dry_run(self, project):
        """Test that --dry-run prints a summary and writes nothing."""
        result = CliRunner().invoke(cli, ["generate", "--root", str(project), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Widgets (1)" in result.output
        assert "POST /api/widgets" in result.output
        assert not (project / "perf").exists()

    def test_default_command(self, project, monkeypatch):
        """Test that running without a subcommand generates the manifest."""
        monkeypatch.chdir(project)
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0, result.output
        assert out_file(project, "js").exists()


class TestInspect:
    """Test the inspect command."""

    def test_prints_endpoints(self, project, monkeypatch):
        """Test that a single file's endpoints are printed as JSON."""
        monkeypatch.chdir(project)
        spec = project / "tests" / "endpoint-tests" / "widgets.spec.ts"

        result = CliRunner().invoke(cli, ["inspect", str(spec)])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["feature"] == "Widgets"
        assert data["endpoints"][0]["name"] == "Create widget"
        assert data["endpoints"][0]["expect"] == {"status": 201}
