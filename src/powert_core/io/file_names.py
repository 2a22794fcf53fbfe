"""
File-name templates for data folders and natural ordering of names.

A template such as ``<BASENAME>-a-b.csv`` is resolved against the name of a
data folder. The placeholder may carry replacements applied to the basename
first: ``<BASENAME|old/new>`` replaces text literally and
``<BASENAME|r:pattern/repl>`` applies a regular expression. Several
replacements can be chained with ``|``.
"""

import logging
import re

logger = logging.getLogger(__name__)

_BASENAME_PATTERN = re.compile(r"<BASENAME(\|[^|/]+/[^|/]*)*>")
_NAME_PARTS_PATTERN = re.compile(r"\D+|\d+(?:\.\d+)?")


def _apply_replacements(basename: str, spec: str) -> str:
    result = basename
    for replace in spec.split("|"):
        if replace.startswith("r:"):
            pattern, repl = replace[2:].split("/", 1)
            result = re.sub(pattern, repl, result)
        else:
            old, new = replace.split("/", 1)
            result = result.replace(old, new)
    return result


def resolve_file_name(basename: str, template: str) -> str:
    """Resolve a file-name template against a folder basename.

    Falls back to the plain basename when a replacement is invalid.
    """
    try:
        filename = template
        for match in _BASENAME_PATTERN.finditer(template):
            placeholder = match.group(0)
            if placeholder == "<BASENAME>":
                resolved = basename
            else:
                # strip '<BASENAME|' and '>'
                resolved = _apply_replacements(basename, placeholder[10:-1])
            filename = filename.replace(placeholder, resolved)
        return filename
    except (re.error, ValueError) as exc:
        logger.warning("Invalid file-name template %r: %s", template, exc)
        return basename


def natural_sort_key(text: str) -> tuple:
    """Sort key comparing digit runs by value, e.g. ``2us`` before ``10us``."""
    key = []
    for part in _NAME_PARTS_PATTERN.findall(text):
        if part[0].isdigit():
            key.append((0, float(part), ""))
        else:
            key.append((1, 0.0, part))
    return tuple(key)
