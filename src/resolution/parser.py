"""Normalization of dependency declarations into DependencyRequest objects.

Declarations arrive as plain names, ``name:spec`` tokens, mappings of name to
version constraint, or (nested) sequences of those. Every shape is flattened
into one request per entry, in declaration order.
"""

import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .errors import ConfigurationError
from .models import ConstraintMode, DependencyRequest, VersionConstraint

# Pessimistic operator as written in gem-style manifests: "~> 1.2"
_PESSIMISTIC = re.compile(r'^~>\s*(.+)$')
_OPERATORS = ('==', '!=', '<=', '>=', '<', '>', '~=', '===')
_ANY_TOKENS = ('', '*', 'any', 'latest', '>= 0', '>=0')

ConstraintInput = Union[None, str, VersionConstraint, Sequence[str]]


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    identifier, spec_part = s.rsplit(':', 1)
    spec_part = spec_part.strip()
    return identifier.strip(), spec_part if spec_part else None


def _translate_clause(clause: str) -> str:
    """Turn one constraint clause into PEP 440 syntax."""
    clause = clause.strip()
    m = _PESSIMISTIC.match(clause)
    if m:
        version = m.group(1).strip()
        # "~> 1" means ">= 1, < 2"; "~=" needs two release segments
        if version.isdigit():
            return f">={version},<{int(version) + 1}"
        return f"~={version}"
    if clause.startswith('='):
        if not clause.startswith('=='):
            return f"=={clause[1:].strip()}"
        return clause
    if clause.startswith(_OPERATORS):
        return clause
    # Bare version means an exact pin
    return f"=={clause}"


def parse_constraint(raw: ConstraintInput) -> Optional[VersionConstraint]:
    """Parse a raw constraint into a VersionConstraint.

    Accepts None, a string (comma separated clauses allowed) or a sequence of
    clause strings. Returns None for "no constraint".

    Raises:
        ConfigurationError: if the text is not a valid constraint.
    """
    if raw is None or isinstance(raw, VersionConstraint):
        return raw
    if isinstance(raw, (list, tuple)):
        clauses = [str(c) for c in raw if str(c).strip()]
        text = ', '.join(clauses)
    elif isinstance(raw, (str, int, float)):
        text = str(raw).strip()
        clauses = [c for c in text.split(',') if c.strip()]
    else:
        raise ConfigurationError(f"Unsupported version constraint: {raw!r}")

    if text.strip().lower() in _ANY_TOKENS:
        return VersionConstraint(raw=text.strip() or '*', mode=ConstraintMode.ANY, specifier=SpecifierSet())

    try:
        specifier = SpecifierSet(','.join(_translate_clause(c) for c in clauses))
    except InvalidSpecifier as e:
        raise ConfigurationError(f"Invalid version constraint '{text}': {e}") from e

    specs = list(specifier)
    if len(specs) == 1 and specs[0].operator in ('==', '===') and '*' not in specs[0].version:
        try:
            Version(specs[0].version)
            mode = ConstraintMode.EXACT
        except InvalidVersion:
            mode = ConstraintMode.RANGE
    else:
        mode = ConstraintMode.RANGE
    return VersionConstraint(raw=text, mode=mode, specifier=specifier)


def build_request(
    name: Any,
    constraint: ConstraintInput = None,
    *,
    source: str = "api",
    framework_predicate: Optional[Callable[[str], bool]] = None,
    raw_token: Optional[str] = None,
) -> DependencyRequest:
    """Construct a DependencyRequest, validating the name.

    Raises:
        ConfigurationError: for an empty or non-string name.
    """
    if not isinstance(name, str):
        raise ConfigurationError(f"Dependency name must be a string, got {type(name).__name__}")
    clean = name.strip()
    if not clean:
        raise ConfigurationError("Dependency name must not be empty")
    internal = bool(framework_predicate(clean)) if framework_predicate else False
    return DependencyRequest(
        name=clean,
        constraint=parse_constraint(constraint),
        is_framework_internal=internal,
        source=source,
        raw_token=raw_token if raw_token is not None else name,
    )


def parse_cli_token(token: str, **kwargs: Any) -> DependencyRequest:
    """Parse a ``name[:spec]`` token into a DependencyRequest."""
    identifier, spec = tokenize_rightmost_colon(token)
    kwargs.setdefault("source", "cli")
    return build_request(identifier, spec, raw_token=token, **kwargs)


def normalize_declarations(
    args: Iterable[Any],
    *,
    source: str = "api",
    framework_predicate: Optional[Callable[[str], bool]] = None,
) -> List[DependencyRequest]:
    """Flatten strings, mappings and nested sequences into requests.

    Raises:
        ConfigurationError: when an entry has an unsupported shape.
    """
    requests: List[DependencyRequest] = []

    def visit(arg: Any) -> None:
        if isinstance(arg, str):
            requests.append(build_request(
                arg, source=source, framework_predicate=framework_predicate))
        elif isinstance(arg, Mapping):
            for name, constraint in arg.items():
                requests.append(build_request(
                    name, constraint, source=source,
                    framework_predicate=framework_predicate))
        elif isinstance(arg, (list, tuple)):
            for item in arg:
                visit(item)
        else:
            raise ConfigurationError(f"Unsupported dependency declaration: {arg!r}")

    for arg in args:
        visit(arg)
    return requests
