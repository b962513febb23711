"""Asynchronous Python client for the Sendblue messaging API.

``Sendblue.call`` performs one authenticated request and returns the
decoded response with camelCase keys, raising ``SendblueError`` when
the API reports a failure.
"""

from sendblue.client import HttpMethod as HttpMethod, Sendblue as Sendblue
from sendblue.config import SendblueSettings as SendblueSettings
from sendblue.errors import (
    RequestFailureCause as RequestFailureCause,
    SendblueError as SendblueError,
    SendblueErrorKind as SendblueErrorKind,
)
from sendblue.utils.serialization import (
    JSONValue as JSONValue,
    camel_case as camel_case,
    keys_to_camel_case as keys_to_camel_case,
)

__version__ = "0.1.0"
