"""Behavioral pattern rules.

Each rule looks at one node and returns the pattern names it matches.
Matching is heuristic text/kind matching, one call site at a time; a node
may match several rules and every match increments its own counter.

Pattern names:
    call:<callee>           any call site whose callee text is short
    async                   async / await markers, goroutine launches
    error:handler           try / catch / except / rescue constructs
    error:throw             throw / raise sites
    error:throw:<Kind>      throw sites with a recoverable error type
    env:<KEY>               literal environment-variable lookups
    literal:url             string literals holding an http(s) URL
    literal:path            string literals holding an absolute path
    event:emit              emit / dispatch / publish style calls
    event:listen            on / addEventListener / subscribe style calls
    io:http                 outbound HTTP calls
    io:db                   query-like storage calls
    io:fs                   filesystem calls
    io:serialize            serialization calls

To add a category, write a function ``(node) -> list[str]`` and append a
``PatternRule`` to ``PATTERN_RULES``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .languages import STRING_KINDS, unquote
from .node import SyntaxNode

CALL_KINDS = frozenset(
    {
        "call_expression",
        "call",
        "function_call",
        "method_invocation",
        "invocation_expression",
        "function_call_expression",
        "member_call_expression",
    }
)

ERROR_HANDLER_KINDS = frozenset(
    {
        "try_statement",
        "catch_clause",
        "except_clause",
        "finally_clause",
        "rescue",
        "ensure",
        "try_expression",
    }
)

THROW_KINDS = frozenset({"throw_statement", "raise_statement", "throw_expression"})

ASYNC_TOKENS = frozenset({"async", "await"})
ASYNC_KINDS = frozenset({"go_statement"})

MAX_CALLEE_LENGTH = 30

_THROW_KIND = re.compile(r"^(?:throw|raise)\s+(?:new\s+)?([A-Z]\w*)")
_URL = re.compile(r"^https?://\S+$")
_PATH = re.compile(r"^/[\w.-]+(?:/[\w.-]+)+/?$")

_ENV_LOOKUPS = (
    re.compile(r"process\.env\.([A-Za-z_]\w*)"),
    re.compile(r"""process\.env\[\s*['"]([^'"]+)['"]\s*\]"""),
    re.compile(r"""os\.environ\[\s*['"]([^'"]+)['"]\s*\]"""),
    re.compile(r"""os\.environ\.get\(\s*['"]([^'"]+)['"].*\)""", re.DOTALL),
    re.compile(r"""os\.getenv\(\s*['"]([^'"]+)['"].*\)""", re.DOTALL),
    re.compile(r"""os\.Getenv\(\s*"([^"]+)"\s*\)"""),
    re.compile(r"""System\.getenv\(\s*"([^"]+)"\s*\)"""),
    re.compile(r"""(?:std::)?env::var\(\s*"([^"]+)"\s*\)"""),
    re.compile(r"""ENV\[\s*['"]([^'"]+)['"]\s*\]"""),
    re.compile(r"""ENV\.fetch\(\s*['"]([^'"]+)['"].*\)""", re.DOTALL),
    re.compile(r"""getenv\(\s*['"]([^'"]+)['"]\s*\)"""),
)
_ENV_KINDS = CALL_KINDS | frozenset(
    {
        "member_expression",
        "subscript_expression",
        "subscript",
        "element_reference",
        "macro_invocation",
        "selector_expression",
    }
)

_EMIT_CALLEE = re.compile(r"(?:^|\.)(?:emit|dispatch|dispatchEvent|publish|trigger|fire)$")
_LISTEN_CALLEE = re.compile(
    r"(?:^|\.)(?:on|once|addEventListener|addListener|subscribe|listen)$"
)
_HTTP_CALLEE = re.compile(
    r"^(?:fetch|axios(?:\.\w+)?|requests\.\w+|httpx\.\w+|http\.(?:get|request|Get|Post)"
    r"|https\.(?:get|request)|urllib\.request\.urlopen|urlopen|\$\.ajax|got|superagent\.\w+"
    r"|(?:\w+\.)*(?:HttpClient|WebClient|RestTemplate)\.\w+|reqwest::\w+|Net::HTTP\.\w+"
    r"|curl_exec)$"
)
_DB_CALLEE = re.compile(
    r"(?:^|\.)(?:query|execute|executemany|exec|raw|findOne|findMany|findAll|findById"
    r"|insertOne|insertMany|updateOne|deleteOne|aggregate|prepare|cursor|QueryRow"
    r"|createQuery|executeQuery|executeUpdate)$"
)
_FS_CALLEE = re.compile(
    r"^(?:fs\.\w+|fsPromises\.\w+|open|os\.(?:remove|unlink|rename|makedirs|mkdir|listdir"
    r"|scandir|walk)|shutil\.\w+|Path\(.*\)\.\w+|os\.(?:Open|Create|ReadFile|WriteFile)"
    r"|ioutil\.\w+|File\.\w+|Files\.\w+|std::fs::\w+|fs::\w+|fopen|file_get_contents"
    r"|file_put_contents|readFileSync|writeFileSync|readFile|writeFile)$",
    re.DOTALL,
)
_SERIALIZE_CALLEE = re.compile(
    r"^(?:JSON\.(?:parse|stringify)|json\.(?:loads?|dumps?|Marshal|Unmarshal|NewEncoder"
    r"|NewDecoder)|yaml\.\w+|pickle\.\w+|toml\.\w+|serde_json::\w+|msgpack\.\w+"
    r"|json_encode|json_decode|serialize|unserialize|Marshal\.\w+|ObjectMapper\.\w+)$"
)


@dataclass(frozen=True)
class PatternRule:
    """A named category of behavioral pattern."""

    name: str
    match: Callable[[SyntaxNode], list[str]]


def callee_text(node: SyntaxNode) -> Optional[str]:
    """Whitespace-normalised callee of a call node, or None."""
    if node.kind not in CALL_KINDS or not node.children:
        return None
    callee = " ".join(node.children[0].text.split())
    return callee or None


def _call_rule(node: SyntaxNode) -> list[str]:
    callee = callee_text(node)
    if callee is None or len(callee) >= MAX_CALLEE_LENGTH:
        return []
    return [f"call:{callee}"]


def _async_rule(node: SyntaxNode) -> list[str]:
    if node.kind in ASYNC_KINDS or (node.kind in ASYNC_TOKENS and not node.children):
        return ["async"]
    return []


def _error_rule(node: SyntaxNode) -> list[str]:
    if node.kind in ERROR_HANDLER_KINDS:
        return ["error:handler"]
    if node.kind in THROW_KINDS:
        tags = ["error:throw"]
        match = _THROW_KIND.match(node.text.strip())
        if match:
            tags.append(f"error:throw:{match.group(1)}")
        return tags
    return []


def _env_rule(node: SyntaxNode) -> list[str]:
    if node.kind not in _ENV_KINDS:
        return []
    text = node.text.strip()
    for lookup in _ENV_LOOKUPS:
        match = lookup.fullmatch(text)
        if match:
            return [f"env:{match.group(1)}"]
    return []


def _literal_rule(node: SyntaxNode) -> list[str]:
    if node.kind not in STRING_KINDS:
        return []
    value = unquote(node.text)
    if "${" in value:
        return []
    if _URL.match(value):
        return ["literal:url"]
    if _PATH.match(value):
        return ["literal:path"]
    return []


def _event_rule(node: SyntaxNode) -> list[str]:
    callee = callee_text(node)
    if callee is None:
        return []
    if _EMIT_CALLEE.search(callee):
        return ["event:emit"]
    if _LISTEN_CALLEE.search(callee):
        return ["event:listen"]
    return []


def _io_rule(node: SyntaxNode) -> list[str]:
    callee = callee_text(node)
    if callee is None:
        return []
    tags = []
    if _HTTP_CALLEE.match(callee):
        tags.append("io:http")
    if _DB_CALLEE.search(callee):
        tags.append("io:db")
    if _FS_CALLEE.match(callee):
        tags.append("io:fs")
    if _SERIALIZE_CALLEE.match(callee):
        tags.append("io:serialize")
    return tags


PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule("call", _call_rule),
    PatternRule("async", _async_rule),
    PatternRule("error", _error_rule),
    PatternRule("env", _env_rule),
    PatternRule("literal", _literal_rule),
    PatternRule("event", _event_rule),
    PatternRule("io", _io_rule),
)


def match_patterns(node: SyntaxNode) -> list[str]:
    """Every pattern name the node matches, across all rules."""
    tags: list[str] = []
    for rule in PATTERN_RULES:
        tags.extend(rule.match(node))
    return tags


def pattern_categories() -> list[str]:
    return [rule.name for rule in PATTERN_RULES]
