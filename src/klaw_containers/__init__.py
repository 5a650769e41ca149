"""klaw-containers: Option and Result containers with do-notation and async support.

Type-safe Option and Result types for Python 3.13+, generator-based error
propagation, lazy async containers, and a few helpers built on them (tagged
errors, exhaustive matching, brands, safe adapters, Option-returning
collections).

Flat imports (preferred):
    from klaw_containers import Option, Some, Nothing, Result, Ok, Err
    from klaw_containers import AsyncOption, AsyncResult, do, do_async, safe

Submodule imports (for organization):
    from klaw_containers.types import Option, Result, DoContext
    from klaw_containers.async_ import AsyncResult
    from klaw_containers.decorators import do, safe
    from klaw_containers.adapters import SafeJSON
"""

from klaw_containers._config import ContainersConfig, get_config, init, reset_config
from klaw_containers._logging import add_log_hook, clear_log_hooks, configure_logging, remove_log_hook

# Adapters
from klaw_containers.adapters import SafeJSON, SafeURI, SafeURL

# Async
from klaw_containers.async_ import AsyncOption, AsyncResult, OptionResource, ResultResource

# Helpers
from klaw_containers.brand import Brand, BrandConstructor, BrandParser
from klaw_containers.collections import OptionDict, OptionList, option_dict, option_list

# Decorators
from klaw_containers.decorators import do, do_async, do_option, do_option_async, safe, safe_async

# Errors
from klaw_containers.exceptions import (
    ErrorInfo,
    FailedPredicateError,
    NoValueError,
    Panic,
    TaggedError,
    UnhandledException,
    is_tagged_error,
    panic,
    tagged_error,
)
from klaw_containers.matching import corrupt, exhaustive, exhaustive_tag

# Types (flattened from types/)
from klaw_containers.types import (
    DoContext,
    Err,
    Nothing,
    NothingType,
    Ok,
    Option,
    Result,
    Some,
)

__all__ = [
    # Async
    'AsyncOption',
    'AsyncResult',
    # Helpers
    'Brand',
    'BrandConstructor',
    'BrandParser',
    # Config
    'ContainersConfig',
    # Types
    'DoContext',
    'Err',
    # Errors
    'ErrorInfo',
    'FailedPredicateError',
    'NoValueError',
    'Nothing',
    'NothingType',
    'Ok',
    'Option',
    'OptionDict',
    'OptionList',
    'OptionResource',
    'Panic',
    'Result',
    'ResultResource',
    # Adapters
    'SafeJSON',
    'SafeURI',
    'SafeURL',
    'Some',
    'TaggedError',
    'UnhandledException',
    # Logging
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'corrupt',
    # Decorators
    'do',
    'do_async',
    'do_option',
    'do_option_async',
    'exhaustive',
    'exhaustive_tag',
    'get_config',
    'init',
    'is_tagged_error',
    'option_dict',
    'option_list',
    'panic',
    'remove_log_hook',
    'reset_config',
    'safe',
    'safe_async',
    'tagged_error',
]

__version__ = '0.1.0'
