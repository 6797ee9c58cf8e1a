"""ContentDesk CLI — operator console for the content approval pipeline."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from contentdesk import __version__
from contentdesk.errors import AuthError, ContentDeskError

console = Console()

QUEUE_KINDS = ["generate_questions", "generate_answer"]


# ── Plumbing ─────────────────────────────────────────────────────────


def _store(ctx: click.Context):
    from contentdesk.auth import CredentialStore

    settings = ctx.obj["settings"]
    return CredentialStore(
        base_dir=settings.home,
        api_origin=settings.api_origin,
        transport=ctx.obj.get("transport"),
        timeout=settings.timeout,
    )


def _fail(exc: ContentDeskError) -> None:
    console.print(f"[red]Error:[/] {exc.message}")
    if isinstance(exc, AuthError):
        console.print("Run [bold]contentdesk login EMAIL[/] to sign in again.")
    raise SystemExit(1)


def _run(ctx: click.Context, fn: Callable[[Any], Awaitable[Any]]) -> Any:
    """Run *fn(client)* on a fresh event loop with a client for this command."""
    from contentdesk.api.client import ContentClient

    settings = ctx.obj["settings"]
    store = _store(ctx)

    async def runner():
        async with ContentClient(
            store,
            settings.api_origin,
            transport=ctx.obj.get("transport"),
            timeout=settings.timeout,
        ) as client:
            return await fn(client)

    try:
        return asyncio.run(runner())
    except ContentDeskError as exc:
        _fail(exc)


def _fmt_time(value) -> str:
    from contentdesk.models.content import OLDEST

    if value == OLDEST:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Log requests to the console")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """ContentDesk — generate, review and publish site content.

    Queue AI generation jobs, watch them finish, and approve or reject
    the questions and answers they produce.
    """
    from contentdesk.config import configure_logging, load_settings

    ctx.ensure_object(dict)
    settings = load_settings(config_path)
    ctx.obj["settings"] = settings
    configure_logging("DEBUG" if verbose else settings.log_level)


# ── Auth ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx: click.Context, email: str, password: str):
    """Sign in and store the API key locally."""
    store = _store(ctx)
    try:
        credential = asyncio.run(store.login(email, password))
    except ContentDeskError as exc:
        _fail(exc)
        return
    hours = credential.seconds_left(store.now()) // 3600
    console.print(f"[green]Logged in[/] as {email} (key {credential.masked}, valid ~{hours}h)")


@main.command()
@click.pass_context
def logout(ctx: click.Context):
    """Forget the stored API key."""
    _store(ctx).clear()
    console.print("Logged out.")


@main.command()
@click.pass_context
def status(ctx: click.Context):
    """Show whether a valid API key is stored."""
    store = _store(ctx)
    credential = store.current()
    settings = ctx.obj["settings"]
    console.print(f"API origin: {settings.api_origin}")
    if credential is None:
        console.print("[yellow]Not logged in.[/]")
    elif not store.is_valid():
        console.print(f"[red]API key {credential.masked} has expired.[/]")
    else:
        minutes = credential.seconds_left(store.now()) // 60
        console.print(f"[green]Logged in[/] (key {credential.masked}, {minutes} min left)")


# ── Generate ─────────────────────────────────────────────────────────


@main.group()
def generate():
    """Queue AI generation jobs."""


@generate.command(name="questions")
@click.option("--tag", "-t", "tags", multiple=True, required=True, help="Keyword to generate for")
@click.option("--count", "-c", default="5", type=click.Choice(["3", "5", "10", "15", "20"]))
@click.pass_context
def generate_questions(ctx: click.Context, tags: tuple, count: str):
    """Generate questions for one or more keywords."""
    from contentdesk.queue import GenerationQueueClient

    async def go(client):
        return await GenerationQueueClient(client).submit_question_generation(tags, int(count))

    job_id = _run(ctx, go)
    suffix = f" (job {job_id})" if job_id else ""
    console.print(f"[green]Queued[/] {count} questions for {len(tags)} keyword(s){suffix}")


@generate.command(name="answers")
@click.option("--question", "-q", "question_ids", multiple=True, required=True,
              help="Approved question id (PK)")
@click.option("--context", "extra_context", default="", help="Additional context for the model")
@click.pass_context
def generate_answers(ctx: click.Context, question_ids: tuple, extra_context: str):
    """Generate answers for approved questions."""
    from contentdesk.errors import ValidationError, ValidationReason
    from contentdesk.queue import GenerationQueueClient

    async def go(client):
        queue = GenerationQueueClient(client)
        approved = {q.pk: q for q in await queue.list_approved_questions()}
        unknown = [qid for qid in question_ids if qid not in approved]
        if unknown:
            raise ValidationError(
                ValidationReason.INVALID_VALUE,
                f"Not an approved question: {', '.join(unknown)}",
            )
        questions = [approved[qid] for qid in question_ids]
        return await queue.submit_answer_generation(questions, extra_context)

    job_id = _run(ctx, go)
    suffix = f" (job {job_id})" if job_id else ""
    console.print(f"[green]Queued[/] answers for {len(question_ids)} question(s){suffix}")


# ── Queue ────────────────────────────────────────────────────────────


def _queue_table(snapshot, kind: str) -> Table:
    table = Table(title=f"{kind} queue ({len(snapshot)} jobs)")
    table.add_column("Job", style="dim")
    table.add_column("Status")
    table.add_column("Created")
    table.add_column("Inputs", style="cyan")
    colors = {"pending": "yellow", "started": "blue", "completed": "green", "failed": "red"}
    for job in snapshot.jobs:
        color = colors.get(job.status.value, "white")
        table.add_row(
            job.id,
            f"[{color}]{job.status.value}[/]",
            _fmt_time(job.created_at),
            ", ".join(job.input_refs)[:60],
        )
    return table


@main.group()
def queue():
    """Inspect the generation queue."""


@queue.command(name="list")
@click.option("--kind", default="generate_questions", type=click.Choice(QUEUE_KINDS))
@click.pass_context
def queue_list(ctx: click.Context, kind: str):
    """Show processing and completed jobs, newest first."""
    from contentdesk.queue import GenerationQueueClient

    async def go(client):
        return await GenerationQueueClient(client).list_queue(kind)

    snapshot = _run(ctx, go)
    if not len(snapshot):
        console.print("[yellow]Queue is empty.[/]")
        return
    console.print(_queue_table(snapshot, kind))


@queue.command(name="watch")
@click.option("--kind", default="generate_questions", type=click.Choice(QUEUE_KINDS))
@click.option("--interval", default=None, type=int, help="Poll interval in ms")
@click.option("--ticks", default=0, type=int, help="Stop after N refreshes (0 = until Ctrl-C)")
@click.pass_context
def queue_watch(ctx: click.Context, kind: str, interval: Optional[int], ticks: int):
    """Poll the queue and print it on every refresh."""
    from contentdesk.queue import GenerationQueueClient, QueueMonitor

    interval_ms = interval or ctx.obj["settings"].poll_interval_ms

    async def go(client):
        done = asyncio.Event()

        def on_update(monitor: QueueMonitor) -> None:
            if monitor.last_error is not None:
                console.print(f"[red]Refresh failed:[/] {monitor.last_error.message}")
            else:
                console.print(_queue_table(monitor.snapshot, kind))
            if ticks and monitor.refresh_count >= ticks:
                done.set()

        monitor = QueueMonitor(
            GenerationQueueClient(client), kind, interval_ms=interval_ms, on_update=on_update
        )
        async with monitor:
            await done.wait()

    try:
        _run(ctx, go)
    except KeyboardInterrupt:
        console.print("Stopped.")


# ── Review ───────────────────────────────────────────────────────────


def _show_item(session) -> None:
    from contentdesk.review import AnswerReviewSession

    item = session.item
    body = item.text
    if isinstance(session, AnswerReviewSession) and session.question is not None:
        body = f"[bold]Q:[/] {session.question.text}\n\n[bold]A:[/] {item.text}"
    subtitle = ""
    tags = getattr(item, "tags", None)
    if tags:
        subtitle = "tags: " + ", ".join(tags)
    console.print(Panel(body, title=f"{session.KIND} {item.pk}", subtitle=subtitle or None))
    if getattr(session, "question_error", None):
        console.print(f"[yellow]{session.question_error}[/]")


async def _review_loop(session) -> None:
    from contentdesk.review import QuestionReviewSession, ReviewState

    await session.fetch_next()
    while True:
        if session.state is ReviewState.EMPTY:
            console.print(f"[green]No more {session.KIND}s to review.[/]")
            return
        if session.state is ReviewState.ERRORED:
            console.print(f"[red]{session.error}[/]")
            if not click.confirm("Retry?", default=True):
                return
            await session.fetch_next()
            continue

        _show_item(session)
        choices = ["a", "e", "d", "s", "q"]
        hint = "[a]pprove [e]dit [d]elete [s]kip [q]uit"
        if isinstance(session, QuestionReviewSession):
            choices[3:3] = ["t", "r"]
            hint = "[a]pprove [e]dit [d]elete [t]ags [r]emove tag [s]kip [q]uit"
        action = click.prompt(hint, type=click.Choice(choices), show_choices=False)

        try:
            if action == "a":
                await session.approve()
            elif action == "e":
                session.toggle_edit()
                text = click.prompt("New text", default=session.edit_buffer)
                await session.approve(text)
            elif action == "d":
                if click.confirm(f"Delete this {session.KIND}?"):
                    await session.delete()
            elif action == "t":
                tags = await session.generate_tags()
                console.print(f"Tags: {', '.join(tags) or '(none)'}")
            elif action == "r":
                tag = click.prompt("Tag to remove")
                await session.remove_tag(tag)
            elif action == "s":
                await session.fetch_next()
            else:
                console.print(f"Reviewed {session.reviewed} {session.KIND}(s).")
                return
        except AuthError:
            raise
        except ContentDeskError:
            # The session is now ERRORED; the loop reports it.
            continue


@main.command()
@click.argument("kind", type=click.Choice(["questions", "answers"]))
@click.pass_context
def review(ctx: click.Context, kind: str):
    """Approve, edit or delete pending questions or answers one at a time."""
    from contentdesk.review import AnswerReviewSession, QuestionReviewSession

    session_cls = QuestionReviewSession if kind == "questions" else AnswerReviewSession

    async def go(client):
        await _review_loop(session_cls(client))

    _run(ctx, go)


# ── Keywords ─────────────────────────────────────────────────────────


@main.group()
def keywords():
    """SEO keyword research."""


@keywords.command(name="list")
@click.option("--approved", is_flag=True, help="Only approved keywords")
@click.option("--search", "-s", default="", help="Filter by text or competition")
@click.pass_context
def keywords_list(ctx: click.Context, approved: bool, search: str):
    """List keywords with search volume and competition."""
    from contentdesk.seo import KeywordService, filter_keywords

    async def go(client):
        service = KeywordService(client)
        return await (service.list_approved() if approved else service.list_all())

    found = filter_keywords(_run(ctx, go), search)
    if not found:
        console.print("[yellow]No keywords found.[/]")
        return

    table = Table(title=f"Keywords ({len(found)})")
    table.add_column("Keyword", style="cyan")
    table.add_column("Volume", justify="right", style="green")
    table.add_column("Competition")
    table.add_column("Approved", justify="center")
    for kw in sorted(found, key=lambda k: k.search_volume, reverse=True):
        table.add_row(
            kw.text,
            f"{kw.search_volume:,}",
            kw.competition.value if kw.competition else "-",
            "yes" if kw.approved else "",
        )
    console.print(table)


# ── Keyword links ────────────────────────────────────────────────────


@main.group()
def links():
    """Keywords the site links automatically."""


@links.command(name="list")
@click.option("--search", "-s", default="", help="Filter by keyword or URL")
@click.pass_context
def links_list(ctx: click.Context, search: str):
    from contentdesk.seo import KeyLinkService, filter_links

    async def go(client):
        return await KeyLinkService(client).list()

    found = filter_links(_run(ctx, go), search)
    if not found:
        console.print("[yellow]No keyword links found.[/]")
        return
    table = Table(title=f"Keyword links ({len(found)})")
    table.add_column("Keyword", style="cyan")
    table.add_column("URL")
    table.add_column("Case", justify="center")
    for link in found:
        table.add_row(link.keyword, link.url, "Aa" if link.case_sensitive else "")
    console.print(table)


@links.command(name="add")
@click.argument("keyword")
@click.argument("url")
@click.option("--case-sensitive", is_flag=True)
@click.pass_context
def links_add(ctx: click.Context, keyword: str, url: str, case_sensitive: bool):
    from contentdesk.seo import KeyLinkService

    async def go(client):
        return await KeyLinkService(client).create(keyword, url, case_sensitive)

    link = _run(ctx, go)
    console.print(f"[green]Linked[/] {link.keyword} -> {link.url}")


@links.command(name="remove")
@click.argument("keywords", nargs=-1, required=True)
@click.pass_context
def links_remove(ctx: click.Context, keywords: tuple):
    from contentdesk.seo import KeyLinkService

    async def go(client):
        return await KeyLinkService(client).delete(keywords)

    removed = _run(ctx, go)
    console.print(f"Removed {removed} keyword link(s).")


# ── Glossary ─────────────────────────────────────────────────────────


@main.group()
def glossary():
    """Glossary definitions."""


@glossary.command(name="list")
@click.pass_context
def glossary_list(ctx: click.Context):
    from contentdesk.seo import GlossaryService

    async def go(client):
        return await GlossaryService(client).list()

    terms = _run(ctx, go)
    if not terms:
        console.print("[yellow]No glossary terms found.[/]")
        return
    table = Table(title=f"Glossary ({len(terms)} terms)")
    table.add_column("Term", style="cyan")
    table.add_column("Definition")
    for t in terms:
        table.add_row(t.term, t.definition[:80])
    console.print(table)


@glossary.command(name="add")
@click.argument("term")
@click.argument("definition")
@click.pass_context
def glossary_add(ctx: click.Context, term: str, definition: str):
    from contentdesk.seo import GlossaryService

    async def go(client):
        return await GlossaryService(client).create(term, definition)

    entry = _run(ctx, go)
    console.print(f"[green]Added[/] {entry.term} ({entry.slug})")


@glossary.command(name="remove")
@click.argument("term")
@click.pass_context
def glossary_remove(ctx: click.Context, term: str):
    from contentdesk.seo import GlossaryService

    async def go(client):
        await GlossaryService(client).delete(term)

    _run(ctx, go)
    console.print(f"Removed {term}.")


# ── Articles ─────────────────────────────────────────────────────────


@main.group()
def articles():
    """Scheduled and published articles."""


@articles.command(name="scheduled")
@click.option("--limit", default=20, type=int)
@click.pass_context
def articles_scheduled(ctx: click.Context, limit: int):
    """List articles waiting to be published, soonest first."""
    from contentdesk.articles import ArticleService

    async def go(client):
        return await ArticleService(client).list_scheduled(limit)

    found, next_token = _run(ctx, go)
    if not found:
        console.print("[yellow]No scheduled articles.[/]")
        return
    table = Table(title=f"Scheduled articles ({len(found)})")
    table.add_column("Id", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("Publishes")
    for a in found:
        table.add_row(a.article_id, a.title[:50], a.category, a.scheduled_at)
    console.print(table)
    if next_token:
        console.print("[dim]More articles available; raise --limit to see them.[/]")


@articles.command(name="delete")
@click.argument("article_id")
@click.pass_context
def articles_delete(ctx: click.Context, article_id: str):
    """Delete a scheduled article by its YYYY-MM-DD-NNNN id."""
    from contentdesk import keys
    from contentdesk.articles import ArticleService
    from contentdesk.errors import ValidationError, ValidationReason
    from contentdesk.models.content import ScheduledArticle

    async def go(client):
        try:
            pk, sk = keys.article_keys(article_id)
        except ValueError as exc:
            raise ValidationError(ValidationReason.MISSING_KEY, str(exc)) from exc
        article = ScheduledArticle(pk=pk, sk=sk, article_id=article_id)
        await ArticleService(client).delete_scheduled(article)

    _run(ctx, go)
    console.print(f"Deleted scheduled article {article_id}.")


@articles.command(name="show")
@click.argument("article_id")
@click.pass_context
def articles_show(ctx: click.Context, article_id: str):
    """Show an article by its YYYY-MM-DD-NNNN id."""
    from contentdesk.articles import ArticleService

    async def go(client):
        return await ArticleService(client).get(article_id)

    a = _run(ctx, go)
    meta = f"{a.category or 'Uncategorized'} | {a.read_time} min | {a.language}"
    if a.author:
        meta += f" | by {a.author}"
    if a.sponsored:
        meta += f" | sponsored by {a.sponsor_name or '?'}"
    body = f"[dim]{meta}[/]\n\n{a.summary}" if a.summary else f"[dim]{meta}[/]"
    subtitle = "tags: " + ", ".join(a.tags) if a.tags else None
    console.print(Panel(body, title=a.title or article_id, subtitle=subtitle))


@articles.command(name="edit")
@click.argument("article_id")
@click.option("--title", default=None)
@click.option("--summary", default=None)
@click.option("--category", default=None)
@click.option("--tag", "tags", multiple=True, help="Replace the tags (repeatable)")
@click.option("--featured/--not-featured", default=None)
@click.option(
    "--publish-type", default="draft",
    type=click.Choice(["draft", "schedule", "publish"]),
)
@click.pass_context
def articles_edit(
    ctx: click.Context,
    article_id: str,
    title: Optional[str],
    summary: Optional[str],
    category: Optional[str],
    tags: tuple,
    featured: Optional[bool],
    publish_type: str,
):
    """Change an article's fields and save it."""
    from contentdesk.articles import ArticleService
    from contentdesk.errors import ValidationError, ValidationReason

    async def go(client):
        service = ArticleService(client)
        article = await service.get(article_id)
        if category is not None:
            known = await service.list_categories()
            if known and category not in known:
                raise ValidationError(
                    ValidationReason.INVALID_VALUE,
                    f"Unknown category {category!r}; pick one of: {', '.join(known)}",
                )
            article.category = category
        if title is not None:
            article.title = title
        if summary is not None:
            article.summary = summary
        if tags:
            article.tags = list(tags)
        if featured is not None:
            article.is_featured = featured
        await service.update(article, publish_type)
        return article

    article = _run(ctx, go)
    console.print(f"[green]Saved[/] {article.title or article_id} as {publish_type}.")


@articles.command(name="categories")
@click.pass_context
def articles_categories(ctx: click.Context):
    from contentdesk.articles import ArticleService

    async def go(client):
        return await ArticleService(client).list_categories()

    names = _run(ctx, go)
    if not names:
        console.print("[yellow]No categories.[/]")
        return
    for name in names:
        console.print(f"  {name}")


# ── Guides ───────────────────────────────────────────────────────────


@main.group()
def guides():
    """Long-form guides."""


@guides.command(name="create")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def guides_create(ctx: click.Context, path: str):
    """Create a guide from a YAML file with a title and sections."""
    from contentdesk.articles import GuideService, load_guide

    async def go(client):
        return await GuideService(client).create(load_guide(path))

    guide = _run(ctx, go)
    console.print(
        f"[green]Guide created:[/] {guide['title']} "
        f"({guide['slug']}, {len(guide['sections'])} sections)"
    )


# ── Media ────────────────────────────────────────────────────────────


@main.group()
def media():
    """YouTube playlists and videos."""


@media.command(name="add-playlist")
@click.argument("url")
@click.option("--title", required=True)
@click.option("--description", default="")
@click.option("--category", default="")
@click.pass_context
def media_add_playlist(ctx: click.Context, url: str, title: str, description: str, category: str):
    from contentdesk.media import MediaService

    async def go(client):
        return await MediaService(client).add_playlist(url, title, description, category)

    playlist = _run(ctx, go)
    console.print(f"[green]Playlist added:[/] {playlist.playlist_id}")


@media.command(name="add-video")
@click.argument("url")
@click.option("--title", required=True)
@click.option("--description", default="")
@click.option("--category", default="")
@click.pass_context
def media_add_video(ctx: click.Context, url: str, title: str, description: str, category: str):
    from contentdesk.media import MediaService

    async def go(client):
        return await MediaService(client).add_video(url, title, description, category)

    video = _run(ctx, go)
    console.print(f"[green]Video added:[/] {video.video_id}")


@media.command(name="playlists")
@click.pass_context
def media_playlists(ctx: click.Context):
    from contentdesk.media import MediaService

    async def go(client):
        return await MediaService(client).list_playlists()

    playlists = _run(ctx, go)
    if not playlists:
        console.print("[yellow]No playlists.[/]")
        return
    table = Table(title=f"Playlists ({len(playlists)})")
    table.add_column("Id", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    for p in playlists:
        table.add_row(p.playlist_id, p.title, p.category)
    console.print(table)


if __name__ == "__main__":
    main()
