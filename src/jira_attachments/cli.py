"""Jira Attachments command line interface

    jira-attachment list ISSUE-KEY [--plain|--csv]
    jira-attachment download ISSUE-KEY (--all | --id ID | FILENAME) [--output DIR]
    jira-attachment add ISSUE-KEY FILE... [--no-input]
    jira-attachment remove ISSUE-KEY ATTACHMENT-ID [--no-input]
"""

import os
import sys
import logging
from typing import List, Optional

import click

from .client import JiraClient
from .config import load_config
from .models.attachment import Attachment
from .utils.errors import JiraError
from .view.render import render_csv, render_plain, render_table

logger = logging.getLogger(__name__)


def get_issue_key(project_key: Optional[str], key: str) -> str:
    """Expand a bare issue number with the default project key (123 -> PROJ-123)."""
    if project_key and key.isdigit():
        return f"{project_key}-{key}"
    return key


def browse_url(server: str, issue_key: str) -> str:
    return f"{server}/browse/{issue_key}"


def _client(ctx: click.Context) -> JiraClient:
    """Build the client on first use so --help works without configuration."""
    if ctx.obj.get('client') is None:
        try:
            ctx.obj['client'] = JiraClient(load_config())
        except JiraError as e:
            raise click.ClickException(str(e))
    return ctx.obj['client']


def _fail(message: str, error: Exception) -> click.ClickException:
    logger.debug(message, exc_info=error)
    return click.ClickException(f"{message}: {error}")


@click.group()
@click.option('--debug', is_flag=True, help='Show debug logging on stderr')
@click.pass_context
def cli(ctx, debug):
    """Manage issue attachments."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    ctx.ensure_object(dict)


@cli.command(name='list')
@click.argument('issue_key')
@click.option('--plain', is_flag=True, help='Plain text output')
@click.option('--csv', 'as_csv', is_flag=True, help='CSV output')
@click.pass_context
def list_attachments(ctx, issue_key, plain, as_csv):
    """List attachments on an issue."""
    client = _client(ctx)
    issue_key = get_issue_key(client.config.project_key, issue_key)

    try:
        issue = client.get_issue(issue_key)
    except JiraError as e:
        raise _fail(f"Failed to fetch issue {issue_key}", e)

    if not issue.attachments:
        click.echo(f"No attachments found for issue {issue_key!r}")
        return

    if as_csv:
        render_csv(issue.attachments, sys.stdout)
    elif plain:
        render_plain(issue.attachments, sys.stdout)
    else:
        render_table(issue.attachments, sys.stdout)


def _select(attachments: List[Attachment], all_: bool, attachment_id: str, filename: str) -> List[Attachment]:
    if all_:
        return list(attachments)
    if attachment_id:
        matches = [a for a in attachments if a.id == attachment_id]
        if not matches:
            raise click.ClickException(f"Attachment with ID {attachment_id!r} not found")
        return matches[:1]
    if filename:
        matches = [a for a in attachments if a.filename == filename]
        if not matches:
            raise click.ClickException(f"Attachment with filename {filename!r} not found")
        return matches[:1]
    raise click.UsageError("Please specify --all, --id, or provide a filename")


@cli.command()
@click.argument('issue_key')
@click.argument('filename', required=False, default='')
@click.option('--all', 'all_', is_flag=True, help='Download all attachments')
@click.option('--id', 'attachment_id', default='', help='Download attachment by ID')
@click.option('--output', '-o', default='.', help='Output directory')
@click.pass_context
def download(ctx, issue_key, filename, all_, attachment_id, output):
    """Download attachments from an issue."""
    client = _client(ctx)
    issue_key = get_issue_key(client.config.project_key, issue_key)

    try:
        issue = client.get_issue(issue_key)
    except JiraError as e:
        raise _fail(f"Failed to fetch issue {issue_key}", e)

    if not issue.attachments:
        raise click.ClickException(f"No attachments found for issue {issue_key!r}")

    selected = _select(issue.attachments, all_, attachment_id, filename)

    if output != '.':
        os.makedirs(output, exist_ok=True)

    for attachment in selected:
        # Never let a server-supplied name escape the output directory
        dest_path = os.path.join(output, os.path.basename(attachment.filename))
        if os.path.exists(dest_path):
            raise click.ClickException(
                f"File {dest_path!r} already exists. Please remove it or use a different output directory"
            )

        try:
            client.download_attachment(attachment.content, dest_path)
        except (JiraError, OSError) as e:
            raise _fail(f"Failed to download {attachment.filename}", e)

        click.echo(f"Downloaded {attachment.filename!r} to {dest_path}")


@cli.command()
@click.argument('issue_key')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--no-input', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def add(ctx, issue_key, files, no_input):
    """Upload files as attachments to an issue."""
    client = _client(ctx)
    issue_key = get_issue_key(client.config.project_key, issue_key)

    if not no_input:
        file_list = "\n".join(f"  - {f}" for f in files)
        click.confirm(f"Upload {len(files)} file(s) to {issue_key}?\n{file_list}\n", abort=True)

    def report(path, _attachments):
        click.echo(f"Uploaded {path!r} to issue {issue_key!r}")

    try:
        client.upload_attachments(issue_key, files, on_uploaded=report)
    except JiraError as e:
        raise _fail("Upload failed", e)

    click.echo(browse_url(client.config.server, issue_key))


@cli.command()
@click.argument('issue_key')
@click.argument('attachment_id')
@click.option('--no-input', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def remove(ctx, issue_key, attachment_id, no_input):
    """Delete an attachment from an issue."""
    client = _client(ctx)
    issue_key = get_issue_key(client.config.project_key, issue_key)

    try:
        issue = client.get_issue(issue_key)
    except JiraError as e:
        raise _fail(f"Failed to fetch issue {issue_key}", e)

    match = next((a for a in issue.attachments if a.id == attachment_id), None)
    if match is None:
        raise click.ClickException(
            f"Attachment with ID {attachment_id!r} not found on issue {issue_key!r}"
        )

    if not no_input:
        click.confirm(
            f"Delete attachment {match.filename!r} (ID: {attachment_id}) from {issue_key}?",
            abort=True
        )

    try:
        client.delete_attachment(attachment_id)
    except JiraError as e:
        raise _fail(f"Failed to delete attachment {attachment_id}", e)

    click.echo(f"Deleted attachment {match.filename!r} from issue {issue_key!r}")
    click.echo(browse_url(client.config.server, issue_key))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
