"""Switchboard command line: chat with agents and inspect the runtime."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..core.errors import SwitchboardError
from ..core.pricing import format_cost

console = Console()


def _setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_runtime(ctx: click.Context):
    from ..core.config import get_effective_config
    from ..core.runtime import build_runtime
    from ..providers.base import get_ai_provider

    opts = ctx.obj
    config = get_effective_config(Path(opts["project"]) if opts["project"] else None)
    _setup_logging(config.get("logging", {}).get("level", "INFO"), opts["verbose"])

    provider = get_ai_provider(
        config,
        provider_override=opts["ai_provider"],
        model_override=opts["ai_model"],
        endpoint_override=opts["ai_endpoint"],
    )
    return build_runtime(config, provider)


@click.group()
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True), help="Project path")
@click.option("--ai-provider", type=click.Choice(["openai", "anthropic", "ollama"]))
@click.option("--ai-model", type=str, help="Model override")
@click.option("--ai-endpoint", type=str, help="Endpoint override")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def switchboard_cli(
    ctx: click.Context,
    project: str | None,
    ai_provider: str | None,
    ai_model: str | None,
    ai_endpoint: str | None,
    verbose: bool,
) -> None:
    """Switchboard - multi-agent tool-calling runtime."""
    ctx.obj = {
        "project": project,
        "ai_provider": ai_provider,
        "ai_model": ai_model,
        "ai_endpoint": ai_endpoint,
        "verbose": verbose,
    }


@switchboard_cli.command()
@click.pass_context
@click.argument("message")
@click.option("--agent", "-a", "agent_id", default="switchboard-default", help="Agent id")
@click.option("--context", "-c", "extra_context", type=str, help="Extra context prepended as a system note")
def chat(ctx: click.Context, message: str, agent_id: str, extra_context: str | None) -> None:
    """Run one conversation turn against an agent.

    Example: switchboard chat "What is 15 * 37?" -a switchboard-default
    """
    from ..models.agent import Message

    runtime = _load_runtime(ctx)
    history = [Message.system(f"Context: {extra_context}")] if extra_context else None

    try:
        response = asyncio.run(runtime.run(agent_id, message, history=history))
    except SwitchboardError as e:
        console.print(f"  [red]ERROR[/red] {escape(str(e))}")
        sys.exit(1)

    console.print()
    console.print(escape(response.content))
    console.print()

    for call in response.tool_calls or []:
        status = "[green]OK[/green]" if call.success else "[red]FAILED[/red]"
        console.print(f"  {status} {call.tool_name} {escape(json.dumps(call.args, default=str))}")

    if response.model:
        complexity = response.complexity.value if response.complexity else "-"
        console.print(f"  Model: [white]{response.model}[/white] ({complexity}), iterations: {response.iterations}")
    if response.usage:
        console.print(
            f"  Tokens: {response.usage.prompt_tokens} in / "
            f"{response.usage.completion_tokens} out"
        )
    if response.cost_info:
        console.print(f"  Cost: [white]{format_cost(response.cost_info.total_cost)}[/white]")


@switchboard_cli.command()
@click.pass_context
def agents(ctx: click.Context) -> None:
    """List registered agents."""
    runtime = _load_runtime(ctx)

    table = Table(title="Agents")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Tools")
    for info in runtime.agents.describe():
        table.add_row(info["id"], info["name"], info["role"], ", ".join(info["tools"]))
    console.print(table)


@switchboard_cli.command()
@click.pass_context
@click.option("--category", type=str, help="Only tools in this category")
def tools(ctx: click.Context, category: str | None) -> None:
    """List registered tools."""
    runtime = _load_runtime(ctx)
    listed = runtime.tools.list_by_category(category) if category else runtime.tools.list()

    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for tool in listed:
        table.add_row(tool.name, tool.description)
    console.print(table)


@switchboard_cli.command("run-tool")
@click.pass_context
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object")
def run_tool(ctx: click.Context, name: str, raw_args: str) -> None:
    """Execute a single tool directly.

    Example: switchboard run-tool calculator --args '{"operation": "add", "a": 2, "b": 3}'
    """
    try:
        args = json.loads(raw_args)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--args")
    if not isinstance(args, dict):
        raise click.BadParameter("Arguments must be a JSON object", param_hint="--args")

    runtime = _load_runtime(ctx)
    result = asyncio.run(runtime.tools.execute(name, args))
    click.echo(result.to_message_content())
    if not result.success:
        sys.exit(1)


@switchboard_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True)
@click.option("--provider", type=click.Choice(["openai", "anthropic", "ollama"]), default="openai")
def init(project: str, provider: str) -> None:
    """Initialize Switchboard config in a project."""
    from ..core.config import initialize_project

    path = initialize_project(Path(project), provider=provider)
    console.print(f"  [green]Initialized[/green] {path}")


def main() -> None:
    switchboard_cli()


if __name__ == "__main__":
    main()
