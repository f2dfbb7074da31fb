"""Terminal front-end for SwitchUp using Rich."""

import argparse
import asyncio
import logging

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from switchup.agent import config
from switchup.agent.conversation import ConversationController
from switchup.agent.llm import GeminiChat
from switchup.memory.models import Message
from switchup.memory.storage import Storage
from switchup.tools.health import HealthSummaryProvider, opening_message

console = Console()

EXIT_WORDS = ("exit", "quit", "q")


def build_controller(storage: Storage | None = None) -> ConversationController:
    """Wire the controller to Gemini and local storage from configuration."""
    return ConversationController(
        llm=GeminiChat(),
        storage=storage or Storage(),
        check_in_config=config.CheckInConfig.from_env(),
    )


def _on_event(event: str, payload: object) -> None:
    if event == "message" and isinstance(payload, Message) and payload.role == "assistant":
        style = "red" if payload.content.startswith("Error:") else "blue"
        console.print(Panel(escape(payload.content), title="SwitchUp Coach", style=style))
    elif event == "quick_replies" and payload:
        console.print("[dim]Quick replies: " + " | ".join(escape(r) for r in payload) + "[/dim]")
    elif event == "busy" and payload:
        console.print("[dim]Coach is thinking...[/dim]")


async def _run_chat() -> None:
    controller = build_controller()
    controller.subscribe(_on_event)
    controller.start_conversation(opening_message(HealthSummaryProvider()))

    while True:
        try:
            user_input = await asyncio.to_thread(Prompt.ask, "\n[bold]You[/bold]")
        except (KeyboardInterrupt, EOFError):
            user_input = "exit"

        if user_input.strip().lower() in EXIT_WORDS:
            console.print("[dim]See you next time![/dim]")
            break

        await controller.send_user_message(user_input)


def run_chat() -> None:
    asyncio.run(_run_chat())


def show_profile(storage: Storage | None = None) -> None:
    """Print the persisted goal, strategy and weekly plan."""
    storage = storage or Storage()
    goal = storage.load_goal()
    strategy = storage.load_strategy()
    plan = storage.load_weekly_plan()

    if goal:
        console.print(Panel(
            f"{escape(goal.text)}\n[dim]Why: {escape(goal.why)}[/dim]\n"
            f"[dim]Set on {goal.created_at.date().isoformat()}[/dim]",
            title="Goal",
        ))
    else:
        console.print("[yellow]No goal yet. Chat with the coach to set one.[/yellow]")

    if strategy:
        lines = [
            f"Daily structure: {strategy.daily_structure or '-'}",
            f"Food preferences: {strategy.food_preferences or '-'}",
            f"Movement: {strategy.movement or '-'}",
            f"Recovery: {strategy.recovery or '-'}",
        ]
        console.print(Panel(escape("\n".join(lines)), title="Strategy"))

    if plan:
        table = Table(title="Weekly Plan")
        table.add_column("Day", style="cyan", justify="right")
        table.add_column("Focus")
        table.add_column("Notes", style="dim")
        for day in plan.days:
            table.add_row(str(day.day_number), escape(day.focus), escape(day.notes or ""))
        console.print(table)


def show_check_ins(storage: Storage | None = None) -> None:
    """Print the daily check-in log."""
    storage = storage or Storage()
    check_ins = storage.load_check_ins()
    if not check_ins:
        console.print("[yellow]No check-ins yet. Type 'daily check-in' in the chat.[/yellow]")
        return

    table = Table(title="Daily Check-Ins")
    table.add_column("Date", style="cyan")
    table.add_column("Question")
    table.add_column("Answer")
    table.add_column("Feedback", style="dim")
    for check_in in check_ins:
        day = check_in.date.date().isoformat()
        for i, answer in enumerate(check_in.answers):
            table.add_row(
                day if i == 0 else "",
                escape(answer.question),
                escape(answer.answer),
                escape(answer.coach_feedback or ""),
            )
    console.print(table)


def main(args: list[str] | None = None):
    """Main CLI entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        prog="switchup",
        description="SwitchUp - chat with your AI health coach",
    )
    parser.add_argument(
        "--chat", action="store_true",
        help="Enter interactive chat mode (default when no flags given)",
    )
    parser.add_argument(
        "--profile", action="store_true",
        help="Show the saved goal, strategy and weekly plan",
    )
    parser.add_argument(
        "--checkins", action="store_true",
        help="Show the daily check-in log",
    )

    parsed = parser.parse_args(args)
    logging.basicConfig(level=config.LOG_LEVEL)

    if parsed.profile:
        show_profile()
        return

    if parsed.checkins:
        show_check_ins()
        return

    run_chat()


if __name__ == "__main__":
    main()
