"""testmirror CLI: scaffold test trees that mirror source trees."""

from ._helpers import main  # noqa: F401

# Import command modules to register Click commands with the main group.
from . import _mirror  # noqa: F401
