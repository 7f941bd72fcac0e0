"""
TagMap Core: Rule-Matching Container
====================================

This package provides an in-memory container that indexes items by tags
and retrieves them with boolean match rules evaluated at query time.

Public API:
- TagMap: The container class
- MatchRule: Base class of the rule tree
- Tags / NotTags / AnyTag: Leaf rules over tag literals
- Rules / NotRules / AnyRule: Composite rules over nested rules
- tags_satisfy: Evaluate a rule against one tag set
- parse_rule / load_rule_file: Build rule trees from data
"""

from tagmap.core.schema import (
    AnyRule,
    AnyTag,
    CompositeRule,
    MatchRule,
    NotRules,
    NotTags,
    Rule,
    RuleKind,
    Rules,
    TagRule,
    Tags,
    load_rule_file,
    parse_rule,
)
from tagmap.core.matcher import QUANTIFIERS, tags_satisfy
from tagmap.core.container import TagMap, build_tag_map

__all__ = [
    "TagMap",
    "build_tag_map",
    "MatchRule",
    "TagRule",
    "CompositeRule",
    "Rule",
    "RuleKind",
    "Tags",
    "NotTags",
    "AnyTag",
    "Rules",
    "NotRules",
    "AnyRule",
    "tags_satisfy",
    "QUANTIFIERS",
    "parse_rule",
    "load_rule_file",
]
