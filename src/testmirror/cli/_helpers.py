"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import click

from ..exceptions import MirrorError
from ..paths import DEFAULT_SUFFIX, normalize_extensions
from ..walk import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _mirror_error(exc: MirrorError) -> click.ClickException:
    """Wrap a library error for display, keeping its numeric code."""
    return click.ClickException(f"[E{exc.code:d}] {exc}")


def _build_exclude(exclude, exclude_from, gitignore):
    """Build an ExcludeFilter from CLI options, or None if none were given."""
    if not exclude and exclude_from is None and not gitignore:
        return None
    from .._exclude import ExcludeFilter
    try:
        return ExcludeFilter(patterns=list(exclude), exclude_from=exclude_from,
                             gitignore=gitignore)
    except OSError as exc:
        raise click.ClickException(f"Cannot read exclude file: {exc}")


def _check_extensions(ctx, param, value):
    """Click callback: normalize --ext values, falling back to the default."""
    try:
        return normalize_extensions(value or DEFAULT_EXTENSIONS)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param)


# ---------------------------------------------------------------------------
# Option decorators
# ---------------------------------------------------------------------------

def _filter_options(f):
    """Options selecting which source items are enumerated."""
    f = click.option("--gitignore", is_flag=True, default=False,
                     help="Honor .gitignore files found in the source tree.")(f)
    f = click.option("--exclude-from", "exclude_from", type=click.Path(exists=True, dir_okay=False),
                     help="Read exclude patterns from file.")(f)
    f = click.option("--exclude", multiple=True,
                     help="Exclude paths matching pattern (gitignore syntax, repeatable).")(f)
    f = click.option("--ext", "extensions", multiple=True, callback=_check_extensions,
                     help=f"File extension to mirror (repeatable, default: {', '.join(DEFAULT_EXTENSIONS)}).")(f)
    f = click.option("--exclude-dir", "exclude_dirs", multiple=True,
                     help=f"Top-level source directory to skip (repeatable, default: {', '.join(DEFAULT_EXCLUDE_DIRS)}; pass '' to skip none).")(f)
    return f


def _suffix_option(f):
    return click.option("--suffix", default=DEFAULT_SUFFIX, show_default=True,
                        help="Text inserted before the extension of mirrored files.")(f)


def _dry_run_option(f):
    return click.option("-n", "--dry-run", is_flag=True, default=False,
                        help="Show what would be created without writing anything.")(f)


def _no_create_option(f):
    return click.option("--no-create", "no_create", is_flag=True, default=False,
                        help="Fail if DEST does not exist instead of creating it.")(f)


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, verbose):
    """testmirror: scaffold a test tree that mirrors a source tree.

    For every source file with a mirrored extension, create a stub at the
    same relative path under DEST, named with a suffix before the
    extension, seeded from a template.  Existing files are never touched,
    so it is safe to re-run as the source grows.

    \b
    Quick start:
      testmirror mirror src/ tests/ --template Template.cs
      testmirror mirror src/ tests/ -t stub.py --ext .py --suffix _test -n
      testmirror ls src/

    \b
    Defaults: --ext .cs, --suffix .Tests, --exclude-dir bin --exclude-dir obj
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
