"""
Rule Matcher
============

Pure evaluation of a rule tree against one tag set.

Both rule families reduce to the same three quantifiers over a predicate:
ALL (vacuously true), NONE (vacuously true) and ANY (vacuously false).
Tag presence is checked by equality only, so tags need not be hashable.
"""

from typing import Any, Callable, Iterable, Sequence

from tagmap.core.schema import (
    AnyRule,
    AnyTag,
    MatchRule,
    NotRules,
    NotTags,
    Rules,
    Tags,
)


def _all(items: Iterable[Any], predicate: Callable[[Any], bool]) -> bool:
    return all(predicate(item) for item in items)


def _none(items: Iterable[Any], predicate: Callable[[Any], bool]) -> bool:
    return not any(predicate(item) for item in items)


def _any(items: Iterable[Any], predicate: Callable[[Any], bool]) -> bool:
    return any(predicate(item) for item in items)


QUANTIFIERS: dict[type[MatchRule], Callable[[Iterable[Any], Callable[[Any], bool]], bool]] = {
    Tags: _all,
    NotTags: _none,
    AnyTag: _any,
    Rules: _all,
    NotRules: _none,
    AnyRule: _any,
}
"""Quantifier applied by each rule variant over its list."""


def tags_satisfy(tags: Sequence[Any], rule: MatchRule) -> bool:
    """
    Check whether a tag set satisfies a rule.

    Parameters
    ----------
    tags : sequence
        Tags stored for one key. Duplicates are allowed; only presence
        matters.
    rule : MatchRule
        Rule tree to evaluate.

    Returns
    -------
    bool
        True if the tags satisfy the rule. Evaluation stops as soon as
        the outcome is known.

    Raises
    ------
    TypeError
        If `rule` is not an instance of one of the six rule variants.
    """
    quantifier = next(
        (QUANTIFIERS[cls] for cls in type(rule).__mro__ if cls in QUANTIFIERS),
        None,
    )
    if quantifier is None:
        raise TypeError(f"Expected a rule variant, got {type(rule).__name__}")

    if isinstance(rule, (Tags, NotTags, AnyTag)):
        return quantifier(rule.tags, lambda wanted: wanted in tags)

    return quantifier(rule.rules, lambda nested: tags_satisfy(tags, nested))
