import pytest
from click.testing import CliRunner
from unittest.mock import patch

from script_studio.cli import cli
from script_studio.config import Config
from script_studio.models import DecisionKind, VideoDecision
from script_studio.service import GenerationResult

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.yaml")

def test_cli_help(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'generate' in result.output
    assert 'init-config' in result.output
    assert 'serve' in result.output

def test_init_config(runner, config_path):
    result = runner.invoke(cli, ['-c', config_path, 'init-config', '-o', config_path])
    assert result.exit_code == 0

    assert Config.from_yaml(config_path) == Config()

    result = runner.invoke(cli, ['-c', config_path, 'init-config', '-o', config_path])
    assert result.exit_code != 0
    assert 'already exists' in result.output

def test_generate_refine_then_approve(runner, config_path, service):
    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(
            cli,
            ['-c', config_path, 'generate', '--topic', 'cats', '--tone', 'Funny', '--genre', 'Entertainment'],
            input="f\nmake it shorter\ns\ns\n",
        )

    assert result.exit_code == 0, result.output
    assert 'Hello' in result.output
    assert 'Shorter hello' in result.output
    assert 'Script approved successfully!' in result.output
    assert [c['kind'] for c in service.decision_calls] == [DecisionKind.REFINE, DecisionKind.APPROVED]
    assert service.generate_calls[0].topic == 'cats'
    assert service.closed

def test_generate_with_video(runner, config_path, service):
    service.generate_result = GenerationResult(text="Hello", video_url="v1", response_id="r1")

    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(cli, ['-c', config_path, 'generate', '-t', 'cats'], input="x\nq\n")

    assert result.exit_code == 0, result.output
    assert service.video_calls == [("v1", VideoDecision.REJECTED)]
    assert 'Video rejected! Sent for revision.' in result.output

def test_generate_prompts_for_topic(runner, config_path, service):
    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(cli, ['-c', config_path, 'generate'], input="dogs\nq\n")

    assert result.exit_code == 0, result.output
    assert service.generate_calls[0].topic == 'dogs'
    assert service.decision_calls == []

def test_generate_failure(runner, config_path, service):
    service.fail_generate = True

    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(cli, ['-c', config_path, 'generate', '-t', 'cats'])

    assert result.exit_code == 1
    assert 'Error generating script' in result.output
    assert service.closed

def test_generate_blank_topic(runner, config_path, service):
    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(cli, ['-c', config_path, 'generate', '-t', '   '])

    assert result.exit_code != 0
    assert 'Invalid request' in result.output
    assert service.generate_calls == []

def test_start_over_with_new_topic(runner, config_path, service):
    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(
            cli, ['-c', config_path, 'generate', '-t', 'cats'],
            input="r\ndogs\nCasual\nTutorial\nq\n",
        )

    assert result.exit_code == 0, result.output
    assert [p.topic for p in service.generate_calls] == ['cats', 'dogs']
    assert service.generate_calls[1].tone.value == 'Casual'
    assert service.generate_calls[1].genre.value == 'Tutorial'

def test_failed_generate_after_start_over_keeps_session(runner, config_path, service):
    service.fail_generate_from = 2

    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(
            cli, ['-c', config_path, 'generate', '-t', 'cats'],
            input="r\ndogs\nProfessional\nEducational\nr\nq\n",
        )

    assert result.exit_code == 0, result.output
    assert 'Error generating script. Please try again.' in result.output
    assert [p.topic for p in service.generate_calls] == ['cats', 'dogs', 'dogs']
    assert service.closed

def test_new_topic_after_failed_generate(runner, config_path, service):
    service.fail_generate_from = 2

    with patch('script_studio.cli.HttpScriptService', return_value=service):
        result = runner.invoke(
            cli, ['-c', config_path, 'generate', '-t', 'cats'],
            input="r\ndogs\nProfessional\nEducational\nn\nbirds\nFunny\nEducational\nq\n",
        )

    assert result.exit_code == 0, result.output
    assert [p.topic for p in service.generate_calls] == ['cats', 'dogs', 'birds']
