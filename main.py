#!/usr/bin/env python3
"""main.py

Interactive CLI for the switchboard.
Routes each message to a specialist agent and renders the result with Rich.
"""

from __future__ import annotations

# Standard Library
import asyncio
import json
import logging
import sys
from typing import Any

# Third-Party Libraries
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.theme import Theme

# Local Modules
from switchboard import Clarify, Respond, Switchboard, build_switchboard

# Load environment variables from .env file
load_dotenv()

# Initialize Rich console with custom theme
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "user": "bold blue",
        "assistant": "green",
    }
)
console = Console(theme=custom_theme)


def display_help() -> None:
    """Display available commands and usage information."""
    help_text = """
**Available Commands:**

- `/help` - Show this help message
- `/agents` - List registered agents
- `/errors` - Show recorded errors
- `/quit` or `/exit` - Exit
- Any other text - Route the message to an agent

**Examples:**

- What's the weather in Berlin?
- Who discovered penicillin?
- ls docs
- Create a note titled Groceries: milk, eggs
    """
    console.print(Panel(Markdown(help_text), title="Help", border_style="cyan"))


def display_agents(sb: Switchboard) -> None:
    """Display every registered agent."""
    table = Table(title="Agents", border_style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for agent in sorted(sb.registry.get_all_agents(), key=lambda a: a.name):
        table.add_row(agent.name, agent.description)
    console.print(table)


def display_errors(sb: Switchboard) -> None:
    """Display the recorded error log."""
    entries = sb.errors.get_errors()
    if not entries:
        console.print("No errors recorded.\n", style="success")
        return

    table = Table(title="Errors", border_style="red")
    table.add_column("Time")
    table.add_column("Agent", style="bold")
    table.add_column("Error")
    for entry in entries:
        table.add_row(
            entry.timestamp.strftime("%H:%M:%S"),
            entry.agent,
            f"{type(entry.error).__name__}: {entry.error}",
        )
    console.print(table)


def format_output(output: Any) -> str:
    """Render an encoded agent output as Markdown text."""
    if isinstance(output, str):
        return output
    return f"```json\n{json.dumps(output, indent=2, ensure_ascii=False)}\n```"


async def handle_message(sb: Switchboard, user_input: str, history: list[dict[str, str]]) -> str:
    """Route one message, run the chosen agent and return the reply text."""
    decision = await sb.router.route_user_input(user_input, conversation=history)

    if isinstance(decision, Respond):
        return decision.message
    if isinstance(decision, Clarify):
        return f"🤔 {decision.question}"

    output = await sb.dispatcher.execute_agent_by_name(decision.agent, decision.args)
    agent = sb.registry.get_agent_by_name(decision.agent)
    return format_output(agent.encode(output) if agent is not None else output)


async def repl(sb: Switchboard) -> None:
    """Main chat loop."""
    history: list[dict[str, str]] = []

    while True:
        try:
            user_input = (await asyncio.to_thread(Prompt.ask, "[bold blue]You[/bold blue]")).strip()
        except (KeyboardInterrupt, EOFError):
            console.print("\n\n👋 Interrupted. Goodbye!\n", style="warning")
            return

        if not user_input:
            continue

        command = user_input.lower()
        if command in ["/quit", "/exit"]:
            console.print("\n👋 Goodbye!\n", style="success")
            return
        elif command == "/help":
            display_help()
            continue
        elif command == "/agents":
            display_agents(sb)
            continue
        elif command == "/errors":
            display_errors(sb)
            continue

        console.print()
        try:
            with console.status("[bold green]Thinking...", spinner="dots"):
                reply = await handle_message(sb, user_input, history)
        except Exception as exc:
            console.print(f"\n❌ Error: {exc}\n", style="error")
            console.print("You can continue chatting or type /quit to exit.\n", style="info")
            continue

        history.append({"role": "user", "content": user_input})
        history.append({"role": "assistant", "content": reply})

        console.print(
            Panel(
                Markdown(reply),
                title="[bold green]Switchboard[/bold green]",
                border_style="green",
            )
        )
        console.print()


async def run() -> None:
    sb = build_switchboard()
    console.print(f"✅ Switchboard ready with {len(sb.registry)} agents!\n", style="success")
    console.print("Type [bold]/help[/bold] for commands, or start chatting!\n", style="info")
    try:
        await repl(sb)
    finally:
        await sb.aclose()


def main() -> None:
    """Main entry point for the switchboard CLI."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\n\n👋 Interrupted. Goodbye!\n", style="warning")
        sys.exit(0)


if __name__ == "__main__":
    main()
