"""terraconf - Generate Terraform resource configuration from state.

Resources that exist only in recorded state are rendered as resource blocks
so they can be adopted into version control.

Example:
    >>> from terraconf import AttributeOverlay, parse_state, render_resource_block
    >>> state = parse_state(open("terraform.tfstate").read())
    >>> for address, resource in state.iter_resources():
    ...     print(render_resource_block(resource, AttributeOverlay(excludes={"arn"})))

Log events are discarded until logging is configured, either by the host
application or with terraconf.utils.logging.configure_logging().
"""

__version__ = "0.1.0"

from terraconf.exceptions import FormatError
from terraconf.models.overlay import AttributeOverlay
from terraconf.render.serializer import render_resource_block
from terraconf.state.reader import parse_state, read_state
from terraconf.utils.logging import configure_null_logging

configure_null_logging()

__all__ = [
    "AttributeOverlay",
    "FormatError",
    "parse_state",
    "read_state",
    "render_resource_block",
]
