import asyncio
import click
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config import Config
from .models import Genre, RequestParameters, Tone, VideoDecision
from .service import HttpScriptService, ScriptService
from .utils.logger import setup_logger
from .workflow import ReviewWorkflow, StatusNotifier, WorkflowError, WorkflowState

TONES = [t.value for t in Tone]
GENRES = [g.value for g in Genre]

@click.group()
@click.option('--config', '-c', type=click.Path(dir_okay=False), default='config.yaml',
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool):
    """Script Studio - generate, refine and approve video scripts."""
    ctx.ensure_object(dict)

    config_path = Path(config)
    if config_path.exists():
        ctx.obj['config'] = Config.from_yaml(config_path)
    else:
        ctx.obj['config'] = Config()

    log_level = "DEBUG" if verbose else ctx.obj['config'].log_level
    logger = setup_logger(log_level, ctx.obj['config'].log_file)
    ctx.obj['logger'] = logger

    logger.debug(f"Script Studio v0.1.0")
    if config_path.exists():
        logger.info(f"Config loaded from: {config_path}")

@cli.command('init-config')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default='config.yaml',
              help='Where to write the configuration')
@click.option('--force', is_flag=True, help='Overwrite an existing file')
@click.pass_context
def init_config(ctx: click.Context, output: str, force: bool):
    """Write the default configuration to a YAML file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        raise click.ClickException(f"{output_path} already exists (use --force to overwrite)")

    Config().to_yaml(output_path)
    ctx.obj['logger'].success(f"Wrote default config to {output_path}")

@cli.command()
@click.option('--topic', '-t', help='Video topic (prompted if omitted)')
@click.option('--tone', type=click.Choice(TONES), default=Tone.PROFESSIONAL.value, help='Script tone')
@click.option('--genre', type=click.Choice(GENRES), default=Genre.EDUCATIONAL.value, help='Script genre')
@click.pass_context
def generate(ctx: click.Context, topic: Optional[str], tone: str, genre: str):
    """Generate a script and review it interactively."""
    config = ctx.obj['config']
    logger = ctx.obj['logger']

    if not topic:
        topic = click.prompt("Topic")

    try:
        params = RequestParameters(topic=topic, tone=tone, genre=genre)
    except ValidationError as e:
        raise click.ClickException(f"Invalid request: {e.errors()[0]['msg']}")

    try:
        final_state = asyncio.run(run_session(config, params))
    except WorkflowError as e:
        logger.error(f"Review session failed: {e}")
        raise click.ClickException(str(e))

    if final_state is WorkflowState.APPROVED:
        logger.success("Script approved")

@cli.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', type=int, default=8000, help='Bind port')
def serve(host: str, port: int):
    """Run the local mock API."""
    import uvicorn
    uvicorn.run("script_studio.api:app", host=host, port=port)

def _action_menu(workflow: ReviewWorkflow) -> dict:
    actions = {}
    if workflow.state is WorkflowState.REVIEWING:
        label = "Refine script" if workflow.feedback.strip() else "Approve script"
        actions.update({'e': "Edit script", 'f': "Set feedback", 's': label})
    if workflow.video is not None:
        if workflow.video.decision is not VideoDecision.APPROVED:
            actions['v'] = "Approve video"
        if workflow.video.decision is not VideoDecision.REJECTED:
            actions['x'] = "Reject video"
    if workflow.state is WorkflowState.REVIEWING:
        actions['r'] = "Start over"
    actions['q'] = "Quit"
    return actions

async def _ask(*args, **kwargs):
    return await asyncio.to_thread(click.prompt, *args, **kwargs)

async def _edit_script(workflow: ReviewWorkflow) -> None:
    workflow.start_edit()
    edited = await asyncio.to_thread(click.edit, workflow.draft.working_text)
    if edited is None:
        workflow.cancel_edit()
        return
    workflow.edit(edited.rstrip("\n"))
    workflow.save_edit()

async def _new_parameters(console: Console) -> RequestParameters:
    while True:
        topic = await _ask("Topic")
        tone = await _ask("Tone", type=click.Choice(TONES), default=Tone.PROFESSIONAL.value)
        genre = await _ask("Genre", type=click.Choice(GENRES), default=Genre.EDUCATIONAL.value)
        try:
            return RequestParameters(topic=topic, tone=tone, genre=genre)
        except ValidationError:
            console.print("[red]Topic must not be empty[/red]")

async def run_session(
    config: Config,
    params: RequestParameters,
    service: Optional[ScriptService] = None,
    console: Optional[Console] = None,
) -> WorkflowState:
    """Drive one interactive review session until approval or quit."""
    console = console or Console()

    def show_status(message: str) -> None:
        if message:
            console.print(Text(message, style="green"))

    status = StatusNotifier(config.workflow.status_duration_ms, on_change=show_status)
    owns_service = service is None
    service = service or HttpScriptService(config.service)
    workflow = ReviewWorkflow(service, status, error_duration_ms=config.workflow.error_duration_ms)

    started = False
    try:
        while True:
            if workflow.state is WorkflowState.IDLE:
                with console.status("Generating..."):
                    created = await workflow.submit(params)
                if not created:
                    if not started:
                        raise click.ClickException(workflow.last_error or "Script generation failed")
                    retry = await _ask("Generation failed: [r]etry, [n]ew topic or [q]uit",
                                       type=click.Choice(['r', 'n', 'q']), show_choices=False)
                    if retry == 'q':
                        break
                    if retry == 'n':
                        params = await _new_parameters(console)
                    continue
                started = True

            title = "Approved script" if workflow.state is WorkflowState.APPROVED else "Script"
            console.print(Panel(Text(workflow.draft.committed_text or "(empty script)"), title=title))
            if workflow.video is not None:
                console.print(Text(f"Video: {workflow.video.artifact.url} ({workflow.video.decision.value})"))

            if workflow.state is WorkflowState.APPROVED and workflow.video is None:
                break

            actions = _action_menu(workflow)
            for key, label in actions.items():
                console.print(f"  [bold]{key}[/bold]  {label}")
            choice = await _ask("Action", type=click.Choice(list(actions)), show_choices=False)

            if choice == 'q':
                break
            elif choice == 'e':
                await _edit_script(workflow)
            elif choice == 'f':
                workflow.set_feedback(await _ask("Feedback (blank to approve)", default="", show_default=False))
            elif choice == 's':
                with console.status("Submitting..."):
                    await workflow.submit_decision()
            elif choice == 'v':
                workflow.video.decide(VideoDecision.APPROVED)
                await workflow.video.wait()
            elif choice == 'x':
                workflow.video.decide(VideoDecision.REJECTED)
                await workflow.video.wait()
            elif choice == 'r':
                workflow.reset()
                params = await _new_parameters(console)

        if workflow.video is not None:
            await workflow.video.wait()
        return workflow.state
    finally:
        status.close()
        if owns_service:
            await service.aclose()

def main():
    cli()

if __name__ == '__main__':
    main()
