"""Main CLI entry point for gptchat."""

from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule

from . import __app_name__, __version__
from .config import Config, get_config, get_config_dir, update_config
from .errors import ChatError
from .logging_config import setup_logging
from .models import MessageRole
from .session import ConversationSession
from .transport import HTTPTransport

# Rich console for output
console = Console()

app = typer.Typer(
    name=__app_name__,
    help="Chat with the OpenAI chat completions API",
    add_completion=False,
    invoke_without_command=True,
)

ROLE_STYLES = {
    MessageRole.SYSTEM: "magenta",
    MessageRole.USER: "yellow",
    MessageRole.ASSISTANT: "green",
}


def _make_transport(cfg: Config) -> HTTPTransport:
    return HTTPTransport(timeout=cfg.timeout)


def _open_session(cfg: Config) -> ConversationSession:
    """Create a session from config, or exit if no API key is set."""
    if not cfg.is_configured:
        console.print(Panel(
            "[bold red]API Key Not Configured[/bold red]\n\n"
            "Please set your OpenAI API key:\n"
            f"  [cyan]{__app_name__} config --api-key <your-key>[/cyan]\n\n"
            "Or set environment variable:\n"
            "  [cyan]export GPTCHAT_API_KEY=<your-key>[/cyan]",
            border_style="red",
        ))
        raise typer.Exit(1)
    return ConversationSession.from_config(cfg, transport=_make_transport(cfg))


def _print_replies(replies: list[str]) -> None:
    for i, reply in enumerate(replies):
        if len(replies) > 1:
            console.print(Rule(f"choice {i}", style="dim"))
        console.print(Markdown(reply))


def _print_history(session: ConversationSession) -> None:
    history = session.history()
    if not history:
        console.print("[dim]History is empty.[/dim]")
        return
    for msg in history:
        style = ROLE_STYLES[msg.role]
        console.print(f"[bold {style}]{msg.role.value}[/bold {style}]: {msg.content}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version information."
    ),
) -> None:
    """gptchat - chat with the OpenAI chat completions API.

    Run without any command to start interactive chat mode.
    """
    cfg = get_config()
    setup_logging(cfg.log_level)

    if ctx.invoked_subcommand is None:
        _chat(cfg)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Message to send"),
    system: Optional[str] = typer.Option(None, "--system", "-S", help="System message sent first"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override the configured model"),
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t", help="Sampling temperature"),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="Nucleus sampling mass"),
    n: Optional[int] = typer.Option(None, "--n", "-n", help="Number of choices to generate"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Token limit for the reply"),
    stop: Optional[list[str]] = typer.Option(None, "--stop", help="Stop sequence (repeatable)"),
) -> None:
    """Send a single message and print the reply."""
    cfg = get_config()
    session = _open_session(cfg)

    if model:
        session.set_model(model)
    if temperature is not None:
        session.set_temperature(temperature)
    if top_p is not None:
        session.set_top_p(top_p)
    if n is not None:
        session.set_n(n)
    if max_tokens is not None:
        session.set_max_tokens(max_tokens)
    if stop:
        if len(stop) == 1:
            session.set_stop(stop[0])
        else:
            session.set_stop_list(stop)
    if system:
        session.add_system_message(system)

    with session:
        try:
            replies = session.ask(prompt)
        except ChatError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    _print_replies(replies)


@app.command()
def config(
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="Set API key"
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Set default model (e.g., gpt-3.5-turbo)"
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", "-e", help="Set chat completions URL"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Set HTTP timeout in seconds"
    ),
    show: bool = typer.Option(
        False, "--show", "-s", help="Show current configuration"
    ),
) -> None:
    """Configure gptchat settings."""
    if show:
        cfg = get_config()
        console.print(Panel.fit(
            f"[bold]Current Configuration[/bold]\n\n"
            f"API Key: {'[green][OK] Set[/green]' if cfg.is_configured else '[red][X] Not set[/red]'}\n"
            f"Model: [cyan]{cfg.model}[/cyan]\n"
            f"Endpoint: [cyan]{cfg.endpoint}[/cyan]\n"
            f"Timeout: [cyan]{cfg.timeout}[/cyan]\n"
            f"Config dir: [dim]{get_config_dir()}[/dim]",
            title="gptchat Config"
        ))
        return

    if not any(value is not None for value in (api_key, model, endpoint, timeout)):
        console.print("[yellow]Use --help to see available options[/yellow]")
        return

    update_config(api_key=api_key, model=model, endpoint=endpoint, timeout=timeout)
    if api_key:
        console.print("[green][OK][/green] API key saved successfully!")
    if model:
        console.print(f"[green][OK][/green] Model set to: [cyan]{model}[/cyan]")
    if endpoint:
        console.print(f"[green][OK][/green] Endpoint set to: [cyan]{endpoint}[/cyan]")
    if timeout is not None:
        console.print(f"[green][OK][/green] Timeout set to: [cyan]{timeout}[/cyan]")


def _show_help() -> None:
    console.print(Panel(
        "[yellow]/history[/yellow]  Show the conversation so far\n"
        "[yellow]/help[/yellow]     Show this help\n"
        "[yellow]exit[/yellow]      Leave the chat",
        title="Commands",
        border_style="blue",
    ))


def _chat(cfg: Config) -> None:
    """Interactive chat loop."""
    session = _open_session(cfg)

    console.print(Panel.fit(
        f"[bold blue]Welcome to {__app_name__}[/bold blue]\n"
        f"Model: [cyan]{cfg.model}[/cyan]\n"
        f"Type [yellow]/help[/yellow] for commands | [yellow]exit[/yellow] to exit",
        title=f"{__app_name__} v{__version__}"
    ))

    with session:
        while True:
            try:
                user_input = console.input("[bold yellow]You[/bold yellow] > ").strip()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if not user_input:
                continue
            if user_input.lower() in ["exit", "quit", "/quit", "/exit"]:
                console.print("[dim]Goodbye![/dim]")
                break
            if user_input == "/help":
                _show_help()
                continue
            if user_input == "/history":
                _print_history(session)
                continue

            try:
                with console.status("[dim]Thinking...[/dim]"):
                    replies = session.ask(user_input)
            except ChatError as e:
                console.print(f"[red]Error:[/red] {e}")
                continue

            _print_replies(replies)


if __name__ == "__main__":
    app()
