from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.text import Text

from .executor import ExecutionResult
from .messages import get_message

console = Console()


def display_thinking(language: str = "en") -> None:
    console.print(f"[blue]{get_message('thinking', language)}[/blue]")


def display_command(command: str, language: str = "en") -> None:
    """Show the generated command; the text is never parsed as markup."""
    console.print()
    console.print(f"[bold blue]{get_message('generated_command', language)}[/bold blue]")
    console.print(Text(command, style="cyan"))
    console.print()


def display_blocked(reason: str, language: str = "en") -> None:
    console.print(f"[bold red]{get_message('blocked', language)}[/bold red]")
    console.print(Text(get_message("blocked_reason", language, reason=reason), style="red"))


def display_dry_run(language: str = "en") -> None:
    console.print(f"[yellow]{get_message('dry_run', language)}[/yellow]")


def confirm_execution(language: str = "en") -> bool:
    """Ask user to confirm command execution."""
    return Confirm.ask(get_message("confirm_execute", language), default=False, console=console)


def confirm_goal_reached(language: str = "en") -> bool:
    return Confirm.ask(get_message("confirm_goal", language), default=True, console=console)


def display_executing(language: str = "en") -> None:
    console.print()
    console.print(f"[yellow]{get_message('executing', language)}[/yellow]")


def display_result(result: ExecutionResult, verbose: bool = True, language: str = "en") -> None:
    """Display command execution results."""
    if result.success:
        console.print(f"[bold green]{get_message('success', language)}[/bold green]")
        if verbose and result.stdout:
            console.print()
            console.print(Text(result.stdout.rstrip("\n")))
        return

    console.print(f"[bold red]{get_message('failure', language, returncode=result.returncode)}[/bold red]")
    if result.stderr:
        console.print(Text(result.stderr.rstrip("\n"), style="red"))


def display_max_attempts(language: str = "en") -> None:
    console.print(f"[bold yellow]{get_message('max_attempts', language)}[/bold yellow]")


def display_synthesis_error(error: str, language: str = "en") -> None:
    console.print(f"[bold red]{escape(get_message('synthesis_failed', language, error=error))}[/bold red]")


def display_debug(system_prompt: str, user_prompt: str, language: str = "en") -> None:
    """Print both prompts sent to the model."""
    console.print(f"[bold blue]{get_message('debug_title', language)}[/bold blue]")
    console.print(Panel(Text(system_prompt), title=get_message("debug_system", language), border_style="blue"))
    console.print(Panel(Text(user_prompt), title=get_message("debug_user", language), border_style="blue"))
    console.print()


def display_config_problems(problems: List[str], language: str = "en") -> None:
    console.print(f"[bold red]{get_message('config_invalid', language)}[/bold red]")
    for problem in problems:
        console.print(f"  - {escape(problem)}")
    console.print(escape(get_message("config_hint", language)))
