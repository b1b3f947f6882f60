"""Word inflection helpers used to derive file, type and routine names."""

from __future__ import annotations

import re

_UNCOUNTABLE = frozenset(
    {
        "equipment",
        "information",
        "rice",
        "money",
        "species",
        "series",
        "fish",
        "sheep",
        "jeans",
        "police",
    }
)

_IRREGULAR = (
    ("people", "person"),
    ("men", "man"),
    ("children", "child"),
    ("sexes", "sex"),
    ("moves", "move"),
    ("zombies", "zombie"),
)

_SINGULAR_RULES = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"(database)s$", r"\1"),
        (r"(quiz)zes$", r"\1"),
        (r"(matr)ices$", r"\1ix"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"^(ox)en", r"\1"),
        (r"(alias|status)(es)?$", r"\1"),
        (r"(octop|vir)(us|i)$", r"\1us"),
        (r"^(a)x[ie]s$", r"\1xis"),
        (r"(cris|test)(is|es)$", r"\1is"),
        (r"(shoe)s$", r"\1"),
        (r"(o)es$", r"\1"),
        (r"(bus)(es)?$", r"\1"),
        (r"^(m|l)ice$", r"\1ouse"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"(m)ovies$", r"\1ovie"),
        (r"(s)eries$", r"\1eries"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"([lr])ves$", r"\1f"),
        (r"(tive)s$", r"\1"),
        (r"(hive)s$", r"\1"),
        (r"([^f])ves$", r"\1fe"),
        (r"(^analy)(sis|ses)$", r"\1sis"),
        (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
        (r"([ti])a$", r"\1um"),
        (r"(n)ews$", r"\1ews"),
        (r"(ss)$", r"\1"),
        (r"s$", ""),
    )
)

_IRREGULAR_RULES = tuple(
    (
        re.compile(f"({re.escape(plural[0])}){re.escape(plural[1:])}$", re.IGNORECASE),
        singular[1:],
    )
    for plural, singular in _IRREGULAR
)

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")


def _words(text: str) -> list[str]:
    return [word for word in _SEPARATORS.split(text) if word]


def camelize(word: str) -> str:
    """Join the words of ``word`` with each one starting in upper case."""
    return "".join(part[0].upper() + part[1:] for part in _words(word))


def camelize_down_first(word: str) -> str:
    """Camelize ``word`` and lower the very first letter."""
    result = camelize(word)
    return result[:1].lower() + result[1:]


def underscore(word: str) -> str:
    """Turn ``word`` into lower case words joined by underscores."""
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    text = _SEPARATORS.sub("_", text)
    return text.strip("_").lower()


def singularize(word: str) -> str:
    """Return the singular form of an English plural noun."""
    words = re.split(r"[-_ ]", word)
    if words and words[-1].lower() in _UNCOUNTABLE:
        return word

    for pattern, tail in _IRREGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(lambda match: match.group(1) + tail, word)

    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word, count=1)

    return word