"""
TagMap: tag-indexed container with boolean match rules.
"""

from tagmap.config import KeyOrder, TagMapSettings, configure_logging, load_settings
from tagmap.core import (
    AnyRule,
    AnyTag,
    MatchRule,
    NotRules,
    NotTags,
    Rules,
    TagMap,
    Tags,
    build_tag_map,
    load_rule_file,
    parse_rule,
    tags_satisfy,
)

__all__ = [
    "TagMap",
    "build_tag_map",
    "MatchRule",
    "Tags",
    "NotTags",
    "AnyTag",
    "Rules",
    "NotRules",
    "AnyRule",
    "tags_satisfy",
    "parse_rule",
    "load_rule_file",
    "KeyOrder",
    "TagMapSettings",
    "load_settings",
    "configure_logging",
]
