"""Core container types: Option, Result and the do-notation context."""

from klaw_containers.types.do import DoContext
from klaw_containers.types.option import Nothing, NothingType, Option, Some
from klaw_containers.types.result import Err, Ok, Result

__all__ = [
    'DoContext',
    'Err',
    'Nothing',
    'NothingType',
    'Ok',
    'Option',
    'Result',
    'Some',
]
