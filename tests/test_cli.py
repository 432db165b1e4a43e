import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mistral_chat.cli import cli
from tests.test_client import PARIS_BODY, MockResponse


@pytest.fixture
def task_file(tmp_path: Path) -> Path:
    path = tmp_path / "task.json"
    path.write_text(
        json.dumps(
            {
                "apiKey": "{{ secret('MISTRAL_API_KEY') }}",
                "modelName": "{{ model }}",
                "messages": "{{ messages }}",
            }
        )
    )
    return path


@pytest.fixture
def vars_file(tmp_path: Path) -> Path:
    path = tmp_path / "vars.json"
    path.write_text(json.dumps({"messages": [{"type": "USER", "content": "What is the capital of France?"}]}))
    return path


def test_run(task_file: Path, vars_file: Path) -> None:
    with patch("mistral_chat.client.requests.Session") as mock_session_cls:
        post = mock_session_cls.return_value.__enter__.return_value.post
        post.return_value = MockResponse(200, PARIS_BODY)
        result = CliRunner().invoke(
            cli,
            [
                "run",
                str(task_file),
                "--vars-file",
                str(vars_file),
                "--var",
                "model=open-mistral-7b",
                "--secret",
                "MISTRAL_API_KEY=my-key",
            ],
        )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output.strip().splitlines()[-1]) == {"response": "Paris", "raw": PARIS_BODY}
    assert post.call_args.kwargs["json"] == {
        "model": "open-mistral-7b",
        "messages": [{"role": "user", "content": "What is the capital of France?"}],
    }


def test_run_api_error(task_file: Path, vars_file: Path) -> None:
    with patch("mistral_chat.client.requests.Session") as mock_session_cls:
        post = mock_session_cls.return_value.__enter__.return_value.post
        post.return_value = MockResponse(401, "unauthorized")
        result = CliRunner().invoke(
            cli,
            [
                "run",
                str(task_file),
                "--vars-file",
                str(vars_file),
                "--var",
                "model=open-mistral-7b",
                "--secret",
                "MISTRAL_API_KEY=bad-key",
            ],
        )

    assert result.exit_code == 1
    assert "Mistral API error: unauthorized" in result.output


def test_run_missing_variable(task_file: Path) -> None:
    with patch("mistral_chat.client.requests.Session") as mock_session_cls:
        result = CliRunner().invoke(cli, ["run", str(task_file), "--secret", "MISTRAL_API_KEY=my-key"])

    assert result.exit_code == 1
    assert "Unable to render" in result.output
    mock_session_cls.assert_not_called()


def test_run_invalid_var(task_file: Path) -> None:
    result = CliRunner().invoke(cli, ["run", str(task_file), "--var", "model"])
    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_run_invalid_task_file(tmp_path: Path) -> None:
    path = tmp_path / "task.json"
    path.write_text(json.dumps({"apiKey": "my-key", "unknown": True}))

    result = CliRunner().invoke(cli, ["run", str(path)])

    assert result.exit_code == 1
    assert "Invalid task definition" in result.output


def test_run_task_file_not_json(tmp_path: Path) -> None:
    path = tmp_path / "task.json"
    path.write_text("apiKey: my-key")

    result = CliRunner().invoke(cli, ["run", str(path)])

    assert result.exit_code == 1
    assert "is not valid JSON" in result.output
