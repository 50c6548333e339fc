"""The mirror and ls commands."""

from __future__ import annotations

import json
import os

import click

from ..exceptions import MirrorError
from ..fs import EntryKind, LocalFileSystem
from ..mirror import ActionKind, format_summary, mirror_tree
from ..paths import relativize
from ..walk import DEFAULT_EXCLUDE_DIRS, RootContext, enumerate_tree
from ._helpers import (
    main,
    _build_exclude,
    _dry_run_option,
    _filter_options,
    _mirror_error,
    _no_create_option,
    _status,
    _suffix_option,
)

_PREFIX = {ActionKind.MKDIR: "d", ActionKind.CREATE: "+", ActionKind.SKIP: "="}


# ---------------------------------------------------------------------------
# mirror
# ---------------------------------------------------------------------------

@main.command()
@click.argument("source", type=click.Path())
@click.argument("dest", type=click.Path())
@click.option("--template", "-t", required=True, type=click.Path(),
              help="File whose contents seed every new stub.")
@_filter_options
@_suffix_option
@click.option("--mirror-dirs", "mirror_dirs", is_flag=True, default=False,
              help="Also create directories that would hold no stubs.")
@_dry_run_option
@_no_create_option
@click.pass_context
def mirror(ctx, source, dest, template, exclude_dirs, extensions, exclude,
           exclude_from, gitignore, suffix, mirror_dirs, dry_run, no_create):
    """Create missing stubs under DEST for every matching file in SOURCE.

    Each SOURCE file ending in one of the --ext extensions maps to
    DEST/<same relative path> with --suffix inserted before the
    extension.  Top-level SOURCE directories named by --exclude-dir are
    skipped entirely.  Stubs that already exist are left as they are.

    \b
    Examples:
        testmirror mirror src/ tests/ -t Template.cs
        testmirror mirror app/ spec/ -t stub.rb --ext .rb --suffix _spec
        testmirror mirror src/ tests/ -t Template.cs --dry-run
    """
    def _on_item(action, rel):
        line = f"{_PREFIX[action]} {rel}"
        if dry_run:
            click.echo(line)
        elif action is not ActionKind.SKIP:
            _status(ctx, line)

    try:
        report = mirror_tree(
            source, dest, template,
            exclude_dirs=exclude_dirs or DEFAULT_EXCLUDE_DIRS,
            extensions=extensions,
            suffix=suffix,
            exclude=_build_exclude(exclude, exclude_from, gitignore),
            mirror_directories=mirror_dirs,
            create_destination=not no_create,
            dry_run=dry_run,
            on_item=_on_item,
        )
    except MirrorError as exc:
        raise _mirror_error(exc)

    if dry_run:
        click.echo(format_summary(report))
    else:
        _status(ctx, f"{format_summary(report)} -> {dest}")


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

@main.command("ls")
@click.argument("source", type=click.Path())
@_filter_options
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Output a JSON list of {path, kind} objects.")
@click.pass_context
def ls_cmd(ctx, source, exclude_dirs, extensions, exclude, exclude_from,
           gitignore, as_json):
    """List the SOURCE items a mirror run would consider.

    Paths are relative to SOURCE; directories end with '/'.  Entries that
    are neither directories nor regular files are marked with their kind,
    since they would abort a mirror run.
    """
    root = RootContext.create(
        source,
        extensions=extensions,
        exclude_dirs=exclude_dirs or DEFAULT_EXCLUDE_DIRS,
        exclude=_build_exclude(exclude, exclude_from, gitignore),
    )
    try:
        entries = [
            (relativize(root.root, e.path).replace(os.sep, "/"), e.kind)
            for e in enumerate_tree(LocalFileSystem(), root)
        ]
    except MirrorError as exc:
        raise _mirror_error(exc)

    _status(ctx, f"{len(entries)} item(s) under {root.root}")
    if as_json:
        click.echo(json.dumps([{"path": p, "kind": str(k)} for p, k in entries]))
        return
    for path, kind in entries:
        if kind.supported:
            click.echo(path + "/" if kind is EntryKind.DIRECTORY else path)
        else:
            click.echo(f"{path}  ({kind})")
