import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from pydantic import ValidationError

from mistral_chat.exceptions import MistralChatException
from mistral_chat.run_context import RunContext
from mistral_chat.settings import get_settings
from mistral_chat.task import ChatCompletion


def _parse_pairs(pairs: Tuple[str, ...], option: str) -> Dict[str, str]:
    parsed = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got `{pair}`.", param_hint=option)
        parsed[key] = value
    return parsed


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level. Defaults to the `MISTRAL_LOG_LEVEL` setting.",
)
def cli(log_level: Optional[str] = None) -> None:
    r"""Mistral chat task CLI."""
    logging.basicConfig(
        level=(log_level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="run")
@click.argument("task_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--var", "variables", multiple=True, help="Run variable, as KEY=VALUE.")
@click.option(
    "--vars-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file holding run variables.",
)
@click.option("--secret", "secrets", multiple=True, help="Secret, as KEY=VALUE.")
def run(
    task_file: Path,
    variables: Tuple[str, ...] = (),
    vars_file: Optional[Path] = None,
    secrets: Tuple[str, ...] = (),
) -> None:
    r"""Run the chat completion task declared in TASK_FILE and print its output as JSON."""
    run_variables: Dict[str, Any] = {}
    if vars_file is not None:
        loaded = _load_json(vars_file)
        if not isinstance(loaded, dict):
            raise click.ClickException(f"{vars_file} must hold a JSON object.")
        run_variables.update(loaded)
    run_variables.update(_parse_pairs(variables, "--var"))

    try:
        task = ChatCompletion.model_validate(_load_json(task_file))
    except ValidationError as e:
        raise click.ClickException(f"Invalid task definition: {e}")

    run_context = RunContext(variables=run_variables, secrets=_parse_pairs(secrets, "--secret"))
    try:
        output = task.run(run_context)
    except MistralChatException as e:
        raise click.ClickException(e.message)

    click.echo(output.model_dump_json())


if __name__ == "__main__":
    cli()
