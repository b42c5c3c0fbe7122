"""Tests for the command line interface."""

from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from scan_report.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def base_args(config_file, template_dir):
    return ['--config', str(config_file)]


class TestGenerateCommand:

    def test_generate(self, runner, base_args, session_file, temp_dir, config_file):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--site', 'https://a.example'
        ])

        assert result.exit_code == 0, result.output
        assert 'Report generated' in result.output
        assert 'Alerts included: 2' in result.output
        assert (temp_dir / 'reports' / 'a.example-report.html').exists()

        with open(config_file) as f:
            assert yaml.safe_load(f)['reports']['template'] == 'simple-html'

    def test_generate_with_levels(self, runner, base_args, session_file, temp_dir):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file),
            '--risk', 'high', '--risk', 'informational', '--confidence', 'medium',
            '--name', 'high.html'
        ])

        assert result.exit_code == 0, result.output
        assert 'Alerts included: 1' in result.output
        assert (temp_dir / 'reports' / 'high.html').exists()

    def test_generate_with_pattern_and_output_dir(self, runner, base_args, session_file,
                                                  temp_dir):
        output_dir = temp_dir / 'elsewhere'
        output_dir.mkdir()

        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--output-dir', str(output_dir),
            '--pattern', 'scan-{site}', '--focus', 'https://b.example', '--template', 'Simple JSON'
        ])

        assert result.exit_code == 0, result.output
        assert (output_dir / 'scan-b.example.json').exists()

    def test_no_alerts_exits_with_error(self, runner, base_args, session_file, temp_dir):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--confidence', 'false positive'
        ])

        assert result.exit_code == 1
        assert 'No alerts match' in result.output
        assert list((temp_dir / 'reports').iterdir()) == []

    def test_allow_empty(self, runner, base_args, session_file):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--confidence', '0', '--allow-empty'
        ])

        assert result.exit_code == 0, result.output
        assert 'Alerts included: 0' in result.output

    def test_unknown_level(self, runner, base_args, session_file):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--risk', 'critical'
        ])

        assert result.exit_code == 1
        assert 'Invalid risks' in result.output

    def test_unknown_template(self, runner, base_args, session_file):
        result = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--template', 'pdf'
        ])

        assert result.exit_code == 1
        assert 'Report template not found: pdf' in result.output

    def test_invalid_session(self, runner, base_args, temp_dir):
        session_file = temp_dir / 'broken.yml'
        session_file.write_text("- not a mapping\n")

        result = runner.invoke(cli, base_args + ['generate', '--session', str(session_file)])

        assert result.exit_code == 1
        assert 'Failed to load session' in result.output

    def test_open_launches_report(self, runner, base_args, session_file, temp_dir):
        with patch('scan_report.cli.click.launch') as launch:
            result = runner.invoke(cli, base_args + [
                'generate', '--session', str(session_file), '--name', 'open.html', '--open'
            ])

        assert result.exit_code == 0, result.output
        launch.assert_called_once_with(str(temp_dir / 'reports' / 'open.html'))

    def test_invalid_config(self, runner, temp_dir, session_file):
        config_file = temp_dir / 'broken.yml'
        config_file.write_text("reports: [unclosed\n")

        result = runner.invoke(cli, ['--config', str(config_file), 'generate',
                                     '--session', str(session_file)])

        assert result.exit_code == 1
        assert 'Failed to load configuration' in result.output

    def test_log_level_override_not_persisted(self, runner, base_args, session_file,
                                              config_file):
        first = runner.invoke(cli, base_args + [
            '--log-level', 'debug', 'generate', '--session', str(session_file),
            '--name', 'first.html'
        ])
        second = runner.invoke(cli, base_args + [
            'generate', '--session', str(session_file), '--name', 'second.html'
        ])

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        with open(config_file) as f:
            assert yaml.safe_load(f)['logging']['level'] == 'ERROR'

    def test_unknown_log_level_rejected(self, runner, base_args, session_file):
        result = runner.invoke(cli, base_args + [
            '--log-level', 'verbose', 'generate', '--session', str(session_file)
        ])

        assert result.exit_code == 2

    def test_config_failing_validation(self, runner, temp_dir, test_config, session_file):
        test_config['logging']['level'] = 'VERBOSE'
        config_file = temp_dir / 'invalid.yml'
        config_file.write_text(yaml.dump(test_config))

        result = runner.invoke(cli, ['--config', str(config_file), 'generate',
                                     '--session', str(session_file)])

        assert result.exit_code == 1
        assert 'Configuration validation failed' in result.output


class TestListingCommands:

    def test_templates(self, runner, base_args):
        result = runner.invoke(cli, base_args + ['templates'])

        assert result.exit_code == 0, result.output
        assert 'Simple HTML' in result.output
        assert 'Simple JSON' in result.output

    def test_templates_empty(self, runner, base_args, temp_dir):
        result = runner.invoke(cli, base_args + ['templates', '--template-dir',
                                                 str(temp_dir / 'none')])

        assert result.exit_code == 0
        assert 'No report templates found' in result.output

    def test_sites(self, runner, base_args, session_file):
        result = runner.invoke(cli, base_args + ['sites', '--session', str(session_file)])

        assert result.exit_code == 0, result.output
        assert 'https://a.example' in result.output
        assert 'https://b.example' in result.output
        assert 'Staging' in result.output

    def test_sites_without_contexts(self, runner, base_args, temp_dir):
        session_file = temp_dir / 'bare.yml'
        session_file.write_text("sites:\n  - https://c.example\n")

        result = runner.invoke(cli, base_args + ['sites', '--session', str(session_file)])

        assert result.exit_code == 0, result.output
        assert 'No contexts defined' in result.output
