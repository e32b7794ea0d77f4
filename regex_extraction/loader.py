"""
Loading of pattern definitions from YAML files

A pattern file is either a bare mapping of name -> pattern, or a document
with the mapping under a ``patterns`` key:

    patterns:
      first_bar: '.*?(bar\\d)'
      greeting: '(hello)'
"""
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigurationError
from logger import get_logger

logger = get_logger(__name__)


def load_pattern_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load pattern definitions from a YAML file

    Args:
        path: YAML file path

    Returns:
        Ordered mapping of name -> raw pattern

    Raises:
        ConfigurationError: If the file is missing, unparseable or malformed
    """
    path = Path(path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read pattern file {path}: {e}", original_error=e) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in pattern file {path}: {e}", original_error=e) from e

    if data is None:
        logger.warning(f"Pattern file {path} is empty")
        return {}

    if isinstance(data, Mapping) and 'patterns' in data:
        data = data['patterns'] or {}

    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Pattern file {path} must contain a mapping of name to pattern")

    patterns = {}
    for name, raw in data.items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Invalid pattern name {name!r} in {path}")
        if not isinstance(raw, str) or not raw:
            raise ConfigurationError(f"Pattern must be a non-empty string in {path}", pattern_name=name)
        patterns[name] = raw

    logger.info(f"Loaded {len(patterns)} patterns from {path}")
    return patterns


def merge_pattern_sources(
    inline: Optional[Mapping[str, str]] = None,
    path: Optional[Union[str, Path]] = None
) -> Dict[str, str]:
    """
    Combine inline pattern definitions with those of a pattern file

    Inline patterns come first; file patterns follow in file order.

    Raises:
        ConfigurationError: If a name is defined in both sources
    """
    patterns = dict(inline or {})

    if path:
        for name, raw in load_pattern_file(path).items():
            if name in patterns:
                raise ConfigurationError(f"Pattern defined both inline and in {path}", pattern_name=name)
            patterns[name] = raw

    return patterns
