"""Naming conventions: map model and property names to storage names.

A resource convention takes a model name (``FileItem``, ``blog.Post``) and
returns the table / collection name. A field convention takes a property
name and returns the column / field name. Conventions are plain functions so
two adapters configured with the same convention compare equal.
"""

import re
from collections.abc import Callable

ResourceNamingConvention = Callable[[str], str]
FieldNamingConvention = Callable[[str], str]

_CAMEL_BOUNDARY_1 = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY_2 = re.compile(r"([a-z\d])([A-Z])")

_UNCOUNTABLE = frozenset({
    "equipment", "information", "rice", "money", "species", "series",
    "fish", "sheep", "moose", "deer", "news", "data", "metadata",
})

_IRREGULAR = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "ox": "oxen",
    "mouse": "mice",
    "goose": "geese",
    "foot": "feet",
    "tooth": "teeth",
}

# First match wins.
_PLURAL_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(quiz)$"), r"\1zes"),
    (re.compile(r"(matr|vert|ind)(?:ix|ex)$"), r"\1ices"),
    (re.compile(r"(octop|vir)us$"), r"\1i"),
    (re.compile(r"(alias|status|bus)$"), r"\1es"),
    (re.compile(r"(buffal|tomat|potat)o$"), r"\1oes"),
    (re.compile(r"([ti])um$"), r"\1a"),
    (re.compile(r"(ax|test|cris)is$"), r"\1es"),
    (re.compile(r"sis$"), "ses"),
    (re.compile(r"(?:([^f])fe|([lr])f)$"), r"\1\2ves"),
    (re.compile(r"(hive)$"), r"\1s"),
    (re.compile(r"([^aeiouy]|qu)y$"), r"\1ies"),
    (re.compile(r"(x|ch|ss|sh|z)$"), r"\1es"),
    (re.compile(r"s$"), "s"),
]


def underscore(name: str) -> str:
    """Convert ``FileItem`` to ``file_item`` and ``blog.Post`` to ``blog/post``."""
    name = name.replace("::", "/").replace(".", "/")
    name = _CAMEL_BOUNDARY_1.sub(r"\1_\2", name)
    name = _CAMEL_BOUNDARY_2.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def demodulize(name: str) -> str:
    """Strip any module path: ``blog.Post`` -> ``Post``."""
    return re.split(r"::|\.", name)[-1]


def pluralize(word: str) -> str:
    """Return the English plural of the last underscore-separated word."""
    head, sep, last = word.rpartition("_")
    lowered = last.lower()
    if not lowered or lowered in _UNCOUNTABLE:
        return word
    if lowered in _IRREGULAR:
        return f"{head}{sep}{_IRREGULAR[lowered]}"
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(lowered):
            return f"{head}{sep}{pattern.sub(replacement, lowered)}"
    return f"{head}{sep}{lowered}s"


def camelize(name: str) -> str:
    parts = [p for p in underscore(name).split("_") if p]
    if not parts:
        return name
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


# --- Resource (model -> storage) conventions ---


def underscored_and_pluralized(model_name: str) -> str:
    """``FileItem`` -> ``file_items``; ``blog.Post`` -> ``blog_posts``."""
    return pluralize(underscore(model_name)).replace("/", "_")


def underscored_and_pluralized_without_module(model_name: str) -> str:
    """``blog.Post`` -> ``posts``."""
    return pluralize(underscore(demodulize(model_name)))


def underscored(model_name: str) -> str:
    """``FileItem`` -> ``file_item``."""
    return underscore(model_name).replace("/", "_")


def yaml(model_name: str) -> str:
    """``FileItem`` -> ``file_items.yaml`` (file-per-model stores)."""
    return f"{underscored_and_pluralized(model_name)}.yaml"


# --- Field (property -> column) conventions ---


def field_underscored(property_name: str) -> str:
    """``contentType`` -> ``content_type``."""
    return underscore(property_name)


def field_lower_camel_cased(property_name: str) -> str:
    """``content_type`` -> ``contentType`` (document stores)."""
    return camelize(property_name)


RESOURCE_NAMING_CONVENTIONS: dict[str, ResourceNamingConvention] = {
    "underscored_and_pluralized": underscored_and_pluralized,
    "underscored_and_pluralized_without_module": underscored_and_pluralized_without_module,
    "underscored": underscored,
    "yaml": yaml,
}

FIELD_NAMING_CONVENTIONS: dict[str, FieldNamingConvention] = {
    "underscored": field_underscored,
    "lower_camel_cased": field_lower_camel_cased,
}


def resource_convention(name: str) -> ResourceNamingConvention:
    """Look up a resource convention by name.

    Raises:
        ValueError: Unknown convention name.
    """
    try:
        return RESOURCE_NAMING_CONVENTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown resource naming convention {name!r}. "
            f"Supported: {', '.join(sorted(RESOURCE_NAMING_CONVENTIONS))}"
        ) from None


def field_convention(name: str) -> FieldNamingConvention:
    """Look up a field convention by name.

    Raises:
        ValueError: Unknown convention name.
    """
    try:
        return FIELD_NAMING_CONVENTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown field naming convention {name!r}. "
            f"Supported: {', '.join(sorted(FIELD_NAMING_CONVENTIONS))}"
        ) from None
