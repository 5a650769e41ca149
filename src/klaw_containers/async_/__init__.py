"""Async containers: AsyncOption and AsyncResult."""

from klaw_containers.async_.option import AsyncOption, OptionResource
from klaw_containers.async_.result import AsyncResult, ResultResource

__all__ = ['AsyncOption', 'AsyncResult', 'OptionResource', 'ResultResource']
