"""Entrypoint: python -m huggingchat_client"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import Awaitable, Callable

import click

from huggingchat_client.app import ChatApp, open_app
from huggingchat_client.application.exceptions import ChatError, NotAuthenticatedError
from huggingchat_client.config import VERSION, settings
from huggingchat_client.domain.entities.message import Message
from huggingchat_client.services import conversation_service, session_service


def _run(action: Callable[[ChatApp], Awaitable[None]]) -> None:
    async def _main() -> None:
        async with open_app(settings) as app:
            await action(app)

    try:
        asyncio.run(_main())
    except NotAuthenticatedError as exc:
        click.secho(exc.detail, fg="red", err=True)
        click.echo("Sign in again: huggingchat login-url", err=True)
        sys.exit(1)
    except ChatError as exc:
        click.secho(f"Error: {exc.detail}", fg="red", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=VERSION, prog_name="huggingchat")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level")
def cli(verbose: bool):
    """Talk to a HuggingChat server from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("login-url")
def login_url():
    """Print the URL to open in a browser to sign in.

    After signing in, the browser is redirected to the callback URL with
    ``code`` and ``state`` query parameters; pass them to ``login``.
    """
    click.echo(settings.login_url)


@cli.command()
@click.argument("code")
@click.argument("state")
def login(code: str, state: str):
    """Finish signing in with the CODE and STATE from the callback URL."""

    async def action(app: ChatApp) -> None:
        user = await session_service.complete_login(
            code, state, app.session, app.store, app.api,
        )
        click.echo(f"Signed in as {user.username}")

    _run(action)


@cli.command()
def logout():
    """Forget the stored session."""

    async def action(app: ChatApp) -> None:
        await session_service.sign_out(app.session, app.store, app.api)
        click.echo("Signed out")

    _run(action)


@cli.command()
def whoami():
    """Show the signed-in user."""

    async def action(app: ChatApp) -> None:
        user = await session_service.refresh_user(app.session, app.store, app.api)
        pro = " (PRO)" if user.is_pro else ""
        click.echo(f"{user.username} <{user.email}>{pro}")

    _run(action)


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Include unlisted models")
def models(show_all: bool):
    """List the models available for new conversations."""

    async def action(app: ChatApp) -> None:
        for model in await conversation_service.refresh_models(app.session, app.api):
            if model.unlisted and not show_all:
                continue
            click.echo(f"{model.id}  {click.style(model.display_name, bold=True)}")

    _run(action)


@cli.command()
def conversations():
    """List conversations, most recent first."""

    async def action(app: ChatApp) -> None:
        items = await conversation_service.refresh_conversations(app.session, app.api)
        for conversation in sorted(items, key=lambda c: c.updated_at, reverse=True):
            stamp = conversation.updated_at.strftime("%Y-%m-%d %H:%M")
            click.echo(f"{conversation.id}  {stamp}  {conversation.title}")

    _run(action)


@cli.command()
@click.argument("model_id")
def new(model_id: str):
    """Start a conversation with MODEL_ID and print its id."""

    async def action(app: ChatApp) -> None:
        conversation = await conversation_service.create_conversation(
            model_id, app.session, app.api,
        )
        click.echo(conversation.id)

    _run(action)


@cli.command()
@click.argument("conversation_id")
@click.argument("title")
def rename(conversation_id: str, title: str):
    """Set the title of a conversation."""

    async def action(app: ChatApp) -> None:
        await conversation_service.rename_conversation(
            conversation_id, title, app.session, app.api,
        )

    _run(action)


@cli.command()
@click.argument("conversation_id")
@click.confirmation_option(prompt="Delete this conversation?")
def delete(conversation_id: str):
    """Delete a conversation."""

    async def action(app: ChatApp) -> None:
        await conversation_service.delete_conversation(
            conversation_id, app.session, app.api,
        )

    _run(action)


@cli.command()
@click.argument("conversation_id")
@click.argument("prompt")
@click.option(
    "--web-search/--no-web-search",
    default=None,
    help="Override the configured web search toggle",
)
@click.option("--file", "files", multiple=True, help="Uploaded file id to attach")
def chat(conversation_id: str, prompt: str, web_search: bool | None, files: tuple[str, ...]):
    """Send PROMPT to a conversation and stream the reply.

    Example:
        huggingchat chat 66a1f0c2e4b0 "Summarize our last exchange"
    """

    async def action(app: ChatApp) -> None:
        conversation = await conversation_service.open_conversation(
            conversation_id, app.session, app.api,
        )
        printed = 0

        def on_message(message: Message) -> None:
            nonlocal printed
            click.echo(message.content[printed:], nl=False)
            printed = len(message.content)

        synchronizer = app.synchronizer(conversation, on_message=on_message)
        try:
            reply = await synchronizer.send_message(
                prompt, list(files) or None, web_search=web_search,
            )
        finally:
            click.echo()

        if reply.web_search and reply.web_search.sources:
            click.echo(click.style("Sources:", bold=True))
            for source in reply.web_search.sources:
                click.echo(f"  {source.title or source.hostname}  {source.link}")

    _run(action)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
