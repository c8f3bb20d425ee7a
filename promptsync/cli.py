# promptsync/cli.py
import queue
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from .services.logging import setup_logging
from .config.loader import get_config
from .core.models import TaskType
from .core.session import PromptSession
from .core.token_counter import count_tokens
from . import __version__

app = typer.Typer(help="PromptSync CLI - build LLM prompts from files without the window.")

TASK_HELP = "Task type: " + ", ".join(t.value for t in TaskType) + ". Unknown values mean Feature."
WATCH_HEALTH_INTERVAL = 1.0 # Seconds between watcher health checks in `watch`


def version_callback(value: bool):
    if value:
        print(f"PromptSync CLI Version: {__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """Sets up logging before any command runs."""
    config = get_config()
    setup_logging(level=config.log_level, verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose


def _resolve_instruction(instruction: str, instruction_file: Optional[Path]) -> str:
    if instruction_file is None:
        return instruction
    try:
        return instruction_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read instruction file {instruction_file}: {e}")
        raise typer.Exit(code=1)


def _build_session(paths: List[Path], task: Optional[str], instruction: str, watch: bool,
                   on_change=None, on_failure=None) -> PromptSession:
    session = PromptSession(config=get_config(), on_change=on_change, watch=watch, on_failure=on_failure)
    if task is not None:
        session.set_task_type(task)
        if session.task_type != task:
            logger.warning(f"Unknown task type '{task}', using {session.task_type.value}.")
    session.instruction = instruction
    added = session.drop(paths)
    if not added:
        session.stop()
        logger.error("No readable files were found in the given paths.")
        raise typer.Exit(code=1)
    return session


def _emit(prompt: str, output: Optional[Path], tokens: bool) -> None:
    if output is None:
        typer.echo(prompt, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(prompt, encoding="utf-8")
        logger.success(f"Prompt written to: {output}")
    if tokens:
        logger.info(f"Prompt tokens: {count_tokens(prompt)}")


@app.command()
def render(
    paths: List[Path] = typer.Argument(..., help="Files or folders to include.", exists=True, resolve_path=True),
    task: Optional[str] = typer.Option(None, "--task", "-t", help=TASK_HELP),
    instruction: str = typer.Option("", "--instruction", "-i", help="Instruction text for the task."),
    instruction_file: Optional[Path] = typer.Option(None, "--instruction-file", help="Read the instruction text from a file.", exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the prompt here instead of stdout.", resolve_path=True),
    tokens: bool = typer.Option(False, "--tokens", help="Log the token count of the prompt."),
):
    """Renders the prompt once and exits."""
    text = _resolve_instruction(instruction, instruction_file)
    session = _build_session(paths, task, text, watch=False)
    _emit(session.render(), output, tokens)


@app.command()
def watch(
    paths: List[Path] = typer.Argument(..., help="Files or folders to include.", exists=True, resolve_path=True),
    output: Path = typer.Option(..., "--output", "-o", help="File to keep up to date with the rendered prompt.", resolve_path=True),
    task: Optional[str] = typer.Option(None, "--task", "-t", help=TASK_HELP),
    instruction: str = typer.Option("", "--instruction", "-i", help="Instruction text for the task."),
    instruction_file: Optional[Path] = typer.Option(None, "--instruction-file", help="Read the instruction text from a file.", exists=True, dir_okay=False),
    tokens: bool = typer.Option(False, "--tokens", help="Log the token count after every render."),
):
    """Renders the prompt, then re-renders it every time a tracked file changes."""
    text = _resolve_instruction(instruction, instruction_file)
    # The watcher thread only posts here; rendering and writing stay on this thread.
    changes: "queue.Queue[None]" = queue.Queue()
    session = _build_session(paths, task, text, watch=True,
                             on_change=lambda: changes.put(None), on_failure=lambda: changes.put(None))
    _emit(session.render(), output, tokens)
    logger.info(f"Watching {len(session.watcher.watched_directories)} director(y/ies). Press Ctrl+C to stop.")
    try:
        while True:
            try:
                changes.get(timeout=WATCH_HEALTH_INTERVAL)
                changed = True
            except queue.Empty:
                changed = False # Nothing posted; still check the observer is alive
            if session.watcher.failed:
                logger.error("File watching failed, stopping.")
                raise typer.Exit(code=1)
            if not changed:
                continue
            _emit(session.render(), output, tokens)
    except KeyboardInterrupt:
        logger.info("Stopped watching.")
    finally:
        session.stop()


if __name__ == "__main__":
    app()
