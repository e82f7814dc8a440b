"""CLI entry point for keyword-agent."""

import json
import logging
import sys
from pathlib import Path

import click

from keyword_agent.client import ChatCompletionClient
from keyword_agent.config import ConfigError, load_settings
from keyword_agent.models import AnalysisFailed

DEMO_TEXT = "بسیار غمگین هستم و نیاز به کمک تو دارم. آیا راه حلی برای بهتر شدن ساعت مطالعه من داری؟"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _build_client(config_path: Path | None, **overrides) -> ChatCompletionClient:
    try:
        settings = load_settings(config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e))
    return ChatCompletionClient.from_settings(settings)


def _format_details(details) -> str:
    if isinstance(details, str):
        return details
    return json.dumps(details, ensure_ascii=False)


def _read_input(text: str | None, file: Path | None) -> str:
    if file is not None:
        return file.read_text(encoding="utf-8")
    if text is None or text == "-":
        return click.get_text_stream("stdin").read()
    return text


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Keyword Agent: extract core keywords from text with a chat-completion LLM."""
    _configure_logging(verbose)


@main.command()
@click.argument("text", required=False)
@click.option("-f", "--file", "file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read input text from a file.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("--model", default=None, help="LLM model to use.")
@click.option("--endpoint", default=None, help="Chat-completion endpoint URL.")
@click.option("--api-key", default=None, help="Bearer token for the endpoint.")
@click.option("--prompt-file", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="System prompt file.")
@click.option("--json", "as_json", is_flag=True, help="Print the full outcome as JSON.")
@click.option("--dry-run", is_flag=True, help="Print the request payload without sending it.")
@click.pass_context
def analyze(
    ctx: click.Context,
    text: str | None,
    file: Path | None,
    config_path: Path | None,
    model: str | None,
    endpoint: str | None,
    api_key: str | None,
    prompt_file: Path | None,
    as_json: bool,
    dry_run: bool,
):
    """Extract keywords from TEXT (or --file, or stdin)."""
    input_text = _read_input(text, file).strip()
    if not input_text:
        raise click.UsageError("No input text given.")

    client = _build_client(
        config_path,
        model=model,
        endpoint=endpoint,
        api_key=api_key,
        system_prompt_file=prompt_file,
    )

    if dry_run:
        payload = client.build_payload(input_text)
        click.echo(json.dumps(payload.model_dump(), ensure_ascii=False, indent=2))
        return

    outcome = client.analyze_text(input_text)

    if as_json:
        click.echo(outcome.model_dump_json())
    elif outcome.ok:
        click.echo(outcome.keywords)
    else:
        click.echo(f"Error: {outcome.message}: {_format_details(outcome.details)}", err=True)

    if not outcome.ok:
        ctx.exit(1)


@main.command()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("--model", default=None, help="LLM model to use.")
def demo(config_path: Path | None, model: str | None):
    """Run keyword extraction on a sample Persian sentence."""
    client = _build_client(config_path, model=model)
    outcome = client.analyze_text(DEMO_TEXT)

    click.echo(f"Input Text: {DEMO_TEXT}")
    if isinstance(outcome, AnalysisFailed):
        result = f"{outcome.message} ({outcome.kind.value}): {_format_details(outcome.details)}"
    else:
        result = outcome.keywords
    click.echo(f"Extracted Keywords: {result}")
