import re
from typing import Iterable, Optional

_SEPARATORS = re.compile(r"[.\-_\s]+")

# Applied in order, repeatedly, until the token stops changing.
# Framework aliases run before the generic js rules so "reactjs" becomes
# "react" instead of "reactjavascript".
SKILL_ALIASES = (
    (re.compile(r"reactjs"), "react"),
    (re.compile(r"nodejs"), "node"),
    (re.compile(r"vuejs"), "vue"),
    (re.compile(r"angularjs"), "angular"),
    (re.compile(r"js$"), "javascript"),
    (re.compile(r"^js"), "javascript"),
)


def normalize_text(s: Optional[str]) -> str:
    if not s:
        return ""
    return " ".join(s.strip().lower().split())


def normalize_skill(name: Optional[str]) -> str:
    """Canonical comparison token for a skill or technology name.

    "React.js", "react-js" and "ReactJS" all become "react"; "JS" becomes
    "javascript". Empty or missing names give "".
    """
    if not name:
        return ""
    token = _SEPARATORS.sub("", name.lower())
    while True:
        rewritten = token
        for pattern, replacement in SKILL_ALIASES:
            rewritten = pattern.sub(replacement, rewritten)
        if rewritten == token:
            return token
        token = rewritten


def contains_either(a: str, b: str) -> bool:
    """Bidirectional substring containment; empty strings never match."""
    if not a or not b:
        return False
    return a in b or b in a


def has_skill(tokens: Iterable[str], required_name: Optional[str]) -> bool:
    """Whether a candidate token set covers a required skill.

    Accepts an exact token match or containment in either direction, so
    "java" matches "javascript" and "react" matches "reactnative". This
    favours recall over precision.
    """
    required = normalize_skill(required_name)
    if not required:
        return False
    if isinstance(tokens, (set, frozenset)) and required in tokens:
        return True
    return any(contains_either(token, required) for token in tokens)


def text_matches_any(value: Optional[str], candidates: Iterable[Optional[str]]) -> bool:
    """Case-insensitive bidirectional containment of value against any candidate."""
    needle = normalize_text(value)
    return any(contains_either(normalize_text(c), needle) for c in candidates)
