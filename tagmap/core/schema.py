"""
Rule Schema
===========

Immutable data models for tag-matching rules.

A rule is a small boolean expression tree. Leaf variants test a literal
list of tags against a tag set; composite variants combine the results
of nested rules.

Rule Kinds:
- TAGS: every listed tag is present
- NOT_TAGS: none of the listed tags is present
- ANY_TAG: at least one listed tag is present
- RULES: every nested rule holds
- NOT_RULES: no nested rule holds
- ANY_RULE: at least one nested rule holds
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Iterable, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


logger = logging.getLogger(__name__)


class RuleKind(str, Enum):
    """Discriminator values for the six rule variants."""

    TAGS = "tags"
    """Match all given tags."""

    NOT_TAGS = "not_tags"
    """Don't match any given tag."""

    ANY_TAG = "any_tag"
    """Match any given tag."""

    RULES = "rules"
    """Match all given rules."""

    NOT_RULES = "not_rules"
    """Don't match any given rule."""

    ANY_RULE = "any_rule"
    """Match any given rule."""


class MatchRule(BaseModel):
    """
    Base class for all rule variants.

    Rules are frozen once constructed. Because children must exist before
    their parent is built, a rule tree can never contain a cycle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str
    """One of the `RuleKind` values; fixed per variant."""

    def depth(self) -> int:
        """Height of the rule tree; a leaf rule has depth 1."""
        return 1

    def leaf_tags(self) -> Iterator[Any]:
        """Yield every tag literal referenced by the tree, depth-first."""
        return iter(())

    def to_dict(self) -> dict[str, Any]:
        """
        Dump the tree into the dict form accepted by `parse_rule`.

        Tag values are kept as-is; converting them for JSON is up to the caller.
        """
        return self.model_dump()


class TagRule(MatchRule):
    """A leaf rule over a literal list of tags."""

    tags: tuple[Any, ...] = ()
    """Tag literals, compared to stored tags by equality."""

    def __init__(self, tags: Iterable[Any] = (), /, **data: Any):
        data.setdefault("tags", tags)
        super().__init__(**data)

    @field_validator("tags", mode="before")
    @classmethod
    def _reject_bare_string(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes)):
            raise ValueError("tags must be a list of tags, not a single string")
        return value

    def leaf_tags(self) -> Iterator[Any]:
        return iter(self.tags)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.tags)!r})"


class CompositeRule(MatchRule):
    """A rule combining the outcomes of nested rules."""

    rules: tuple["Rule", ...] = ()
    """Nested rules, evaluated recursively."""

    def __init__(self, rules: Iterable["MatchRule"] = (), /, **data: Any):
        data.setdefault("rules", rules)
        super().__init__(**data)

    def depth(self) -> int:
        return 1 + max((rule.depth() for rule in self.rules), default=0)

    def leaf_tags(self) -> Iterator[Any]:
        for rule in self.rules:
            yield from rule.leaf_tags()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self.rules)!r})"


class Tags(TagRule):
    """Match all given tags."""

    kind: Literal["tags"] = "tags"


class NotTags(TagRule):
    """Don't match any given tag."""

    kind: Literal["not_tags"] = "not_tags"


class AnyTag(TagRule):
    """Match any given tag."""

    kind: Literal["any_tag"] = "any_tag"


class Rules(CompositeRule):
    """Match all given rules."""

    kind: Literal["rules"] = "rules"


class NotRules(CompositeRule):
    """Don't match any given rule."""

    kind: Literal["not_rules"] = "not_rules"


class AnyRule(CompositeRule):
    """Match any given rule."""

    kind: Literal["any_rule"] = "any_rule"


Rule = Annotated[
    Union[Tags, NotTags, AnyTag, Rules, NotRules, AnyRule],
    Field(discriminator="kind"),
]
"""Any concrete rule variant, discriminated by its `kind` field."""

for _composite in (CompositeRule, Rules, NotRules, AnyRule):
    _composite.model_rebuild()

_RULE_ADAPTER: TypeAdapter[MatchRule] = TypeAdapter(Rule)


def parse_rule(data: Any) -> MatchRule:
    """
    Validate a nested dict (or an existing rule) into a rule tree.

    Parameters
    ----------
    data : dict
        Rule definition, e.g.
        ``{"kind": "rules", "rules": [{"kind": "tags", "tags": ["fish"]}]}``

    Returns
    -------
    MatchRule
        The validated rule tree.

    Raises
    ------
    pydantic.ValidationError
        If the definition names an unknown kind or mixes the tag and
        rule families.
    """
    if isinstance(data, MatchRule):
        return data
    return _RULE_ADAPTER.validate_python(data)


def load_rule_file(path: Path | str) -> MatchRule:
    """Load a rule definition from a JSON file."""
    logger.info("Loading rule definition from %s", path)
    with open(path) as f:
        data = json.load(f)
    return parse_rule(data)
