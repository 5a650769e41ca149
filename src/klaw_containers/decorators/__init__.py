"""Decorators: @do, @do_option, @safe and their async variants."""

from klaw_containers.decorators.do import do, do_async, do_option, do_option_async
from klaw_containers.decorators.safe import safe, safe_async

__all__ = [
    'do',
    'do_async',
    'do_option',
    'do_option_async',
    'safe',
    'safe_async',
]
