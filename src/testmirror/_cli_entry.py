"""Console-script entry point for ``testmirror``.

click ships in the optional ``cli`` extra.  Without it the command prints
an install hint and exits with status 1 instead of a traceback.
"""

import sys

_MISSING_CLICK = (
    "testmirror: the command-line interface needs click.\n"
    "Install the extra with:  pip install 'testmirror[cli]'"
)


def main(argv=None):
    try:
        from .cli import main as cli
    except ImportError as exc:
        if (exc.name or "").partition(".")[0] != "click":
            raise
        sys.exit(_MISSING_CLICK)
    cli.main(args=argv, prog_name="testmirror")
