"""
Equivalency options: the configuration surface of a comparison.

Options are plain dataclasses with fluent builders, or loaded from YAML:

    equivalency:
      kind: table                # table | dataset
      allow_mismatched_types: false
      strict_ordering: true
      max_depth: 32
      excluding: [display_expression]
      excluding_paths: [rows.row_error]
      including: []
      mappings: {table_name: table_name}
      strict_member_matching: false
      excluded_tables: [Audit]
      excluded_columns: {Customers: [ModifiedAt]}
      excluded_columns_in_all_tables: [RowVersion]
      ignore_unmatched_columns: false
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tablequiv.domain.constants import DEFAULT_MAX_DEPTH
from tablequiv.domain.errors import EquivalencyConfigError, ErrorCodes
from tablequiv.equivalency.context import Node
from tablequiv.equivalency.members import Member
from tablequiv.equivalency.rules import (
    AllDeclaredMembersSelectionRule,
    ExcludeMemberByNameSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    IncludeMemberByNameSelectionRule,
    MappedMemberMatchingRule,
    MatchingRule,
    MustMatchByNameRule,
    SelectionRule,
    TryMatchByNameRule,
)


def default_selection_rules() -> list[SelectionRule]:
    return [AllDeclaredMembersSelectionRule()]


def default_matching_rules() -> list[MatchingRule]:
    return [TryMatchByNameRule()]


def default_steps() -> list:
    from tablequiv.equivalency.steps import default_steps as _default_steps
    return _default_steps()


# =============================================================================
# Generic Options
# =============================================================================

@dataclass
class EquivalencyOptions:
    """
    Options shared by every comparison.

    use_runtime_types: pick members/steps by the expectation's runtime type
    strict_ordering: collections must match item by item in order
    max_depth: recursion ceiling (DEPTH_EXCEEDED failure beyond it)
    """
    use_runtime_types: bool = True
    strict_ordering: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    selection_rules: list[SelectionRule] = field(default_factory=default_selection_rules)
    matching_rules: list[MatchingRule] = field(default_factory=default_matching_rules)
    steps: list = field(default_factory=default_steps)

    def get_expectation_type(self, runtime_type: Any, compile_time_type: Any) -> Any:
        if self.use_runtime_types and runtime_type is not None:
            return runtime_type
        return compile_time_type

    def validate(self) -> None:
        """
        Raises:
            EquivalencyConfigError: Options that make a comparison impossible
        """
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise EquivalencyConfigError(
                ErrorCodes.INVALID_OPTION, option="max_depth", value=self.max_depth,
            )
        if not self.steps:
            raise EquivalencyConfigError(ErrorCodes.INVALID_OPTION, option="steps", value=[])
        if not self.selection_rules:
            raise EquivalencyConfigError(
                ErrorCodes.INVALID_OPTION, option="selection_rules", value=[],
            )

    # -------------------------------------------------------------------------
    # Member selection
    # -------------------------------------------------------------------------

    def excluding(self, *names: str) -> "EquivalencyOptions":
        """Exclude members by name at every level."""
        for name in names:
            self.selection_rules.append(ExcludeMemberByNameSelectionRule(name))
        return self

    def excluding_path(self, *paths: str) -> "EquivalencyOptions":
        """Exclude members by (index-free) path, e.g. "rows.row_error"."""
        for path in paths:
            self.selection_rules.append(ExcludeMemberByPathSelectionRule(path))
        return self

    def excluding_members_where(
        self,
        predicate: Callable[[Member, Node], bool],
        description: str = "",
    ) -> "EquivalencyOptions":
        self.selection_rules.append(ExcludeMemberByPredicateSelectionRule(predicate, description))
        return self

    def including(self, *names: str) -> "EquivalencyOptions":
        """Re-include members excluded by an earlier rule."""
        for name in names:
            self.selection_rules.append(IncludeMemberByNameSelectionRule(name))
        return self

    # -------------------------------------------------------------------------
    # Member matching
    # -------------------------------------------------------------------------

    def with_mapping(self, expectation_name: str, subject_name: str) -> "EquivalencyOptions":
        """Compare expectation member `expectation_name` with subject member `subject_name`."""
        self.matching_rules.insert(0, MappedMemberMatchingRule(expectation_name, subject_name))
        return self

    def with_strict_member_matching(self) -> "EquivalencyOptions":
        """A member without a subject counterpart becomes a MISSING_MEMBER failure."""
        self.matching_rules = [
            MustMatchByNameRule() if isinstance(rule, TryMatchByNameRule) else rule
            for rule in self.matching_rules
        ]
        if not any(isinstance(rule, MustMatchByNameRule) for rule in self.matching_rules):
            self.matching_rules.append(MustMatchByNameRule())
        return self

    # -------------------------------------------------------------------------
    # Collections and limits
    # -------------------------------------------------------------------------

    def with_strict_ordering(self) -> "EquivalencyOptions":
        self.strict_ordering = True
        return self

    def without_strict_ordering(self) -> "EquivalencyOptions":
        self.strict_ordering = False
        return self

    def with_max_depth(self, max_depth: int) -> "EquivalencyOptions":
        self.max_depth = max_depth
        self.validate()
        return self

    def respecting_declared_types(self) -> "EquivalencyOptions":
        self.use_runtime_types = False
        return self


# =============================================================================
# Table Document Options
# =============================================================================

@dataclass
class DataEquivalencyOptions(EquivalencyOptions):
    """
    Options for table documents.

    allow_mismatched_types: do not require subject and expectation to be the
    same concrete class (members are still compared).
    """
    allow_mismatched_types: bool = False
    ignore_unmatched_columns: bool = False
    excluded_tables: set[str] = field(default_factory=set)
    excluded_columns: dict[str, set[str]] = field(default_factory=dict)
    excluded_columns_in_all_tables: set[str] = field(default_factory=set)

    def allowing_mismatched_types(self) -> "DataEquivalencyOptions":
        self.allow_mismatched_types = True
        return self

    def ignoring_unmatched_columns(self) -> "DataEquivalencyOptions":
        self.ignore_unmatched_columns = True
        return self

    def excluding_table(self, table_name: str) -> "DataEquivalencyOptions":
        self.excluded_tables.add(table_name)
        return self

    def excluding_tables(self, *table_names: str) -> "DataEquivalencyOptions":
        self.excluded_tables.update(table_names)
        return self

    def excluding_column(self, table_name: str, column_name: str) -> "DataEquivalencyOptions":
        self.excluded_columns.setdefault(table_name, set()).add(column_name)
        return self

    def excluding_columns(self, table_name: str, *column_names: str) -> "DataEquivalencyOptions":
        self.excluded_columns.setdefault(table_name, set()).update(column_names)
        return self

    def excluding_column_in_all_tables(self, column_name: str) -> "DataEquivalencyOptions":
        self.excluded_columns_in_all_tables.add(column_name)
        return self

    def is_table_excluded(self, table_name: str) -> bool:
        return table_name in self.excluded_tables

    def is_column_excluded(self, table_name: str, column_name: str) -> bool:
        if column_name in self.excluded_columns_in_all_tables:
            return True
        return column_name in self.excluded_columns.get(table_name, set())

    @property
    def has_column_exclusions(self) -> bool:
        return bool(self.excluded_columns_in_all_tables) or any(self.excluded_columns.values())


@dataclass
class DataTableEquivalencyOptions(DataEquivalencyOptions):
    """Options for comparing a single table."""


@dataclass
class DataSetEquivalencyOptions(DataEquivalencyOptions):
    """Options for comparing a dataset (applies to every nested table)."""


# =============================================================================
# YAML Loading
# =============================================================================

_OPTIONS_BY_KIND: dict[str, type[DataEquivalencyOptions]] = {
    "table": DataTableEquivalencyOptions,
    "dataset": DataSetEquivalencyOptions,
}

_OPTION_KEYS = frozenset([
    "kind",
    "allow_mismatched_types",
    "use_runtime_types",
    "strict_ordering",
    "max_depth",
    "excluding",
    "excluding_paths",
    "including",
    "mappings",
    "strict_member_matching",
    "excluded_tables",
    "excluded_columns",
    "excluded_columns_in_all_tables",
    "ignore_unmatched_columns",
])


def load_options(path: Path) -> DataEquivalencyOptions:
    """
    Load options from a YAML file.

    The keys may sit at the top level or under an `equivalency:` section.

    Raises:
        EquivalencyConfigError: Unreadable YAML, unknown keys or bad values
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise EquivalencyConfigError(
            ErrorCodes.OPTIONS_FILE_INVALID, path=str(path), error=str(e),
        ) from e

    return options_from_dict(raw or {}, source=str(path))


def options_from_dict(raw: Any, source: str = "<dict>") -> DataEquivalencyOptions:
    """
    Build options from a plain mapping (parsed YAML).

    Raises:
        EquivalencyConfigError: Unknown keys or bad values
    """
    if isinstance(raw, dict) and set(raw) == {"equivalency"}:
        raw = raw["equivalency"] or {}

    if not isinstance(raw, dict):
        raise EquivalencyConfigError(
            ErrorCodes.OPTIONS_FILE_INVALID, source=source, error="expected a mapping",
        )

    unknown = sorted(set(raw) - _OPTION_KEYS)
    if unknown:
        raise EquivalencyConfigError(
            ErrorCodes.OPTIONS_FILE_INVALID, source=source, unknown_keys=unknown,
        )

    kind = raw.get("kind", "table")
    options_cls = _OPTIONS_BY_KIND.get(kind)
    if options_cls is None:
        raise EquivalencyConfigError(
            ErrorCodes.INVALID_OPTION, option="kind", value=kind, valid_values=sorted(_OPTIONS_BY_KIND),
        )

    options = options_cls()

    for flag in ("allow_mismatched_types", "use_runtime_types", "strict_ordering", "ignore_unmatched_columns"):
        if flag in raw:
            value = raw[flag]
            if not isinstance(value, bool):
                raise EquivalencyConfigError(ErrorCodes.INVALID_OPTION, option=flag, value=value)
            setattr(options, flag, value)

    if "max_depth" in raw:
        options.max_depth = raw["max_depth"]

    options.excluding(*_string_list(raw, "excluding", source))
    options.excluding_path(*_string_list(raw, "excluding_paths", source))
    options.including(*_string_list(raw, "including", source))

    mappings = raw.get("mappings") or {}
    if not isinstance(mappings, dict):
        raise EquivalencyConfigError(ErrorCodes.INVALID_OPTION, option="mappings", value=mappings)
    for expectation_name, subject_name in mappings.items():
        options.with_mapping(str(expectation_name), str(subject_name))

    if raw.get("strict_member_matching", False):
        options.with_strict_member_matching()

    options.excluding_tables(*_string_list(raw, "excluded_tables", source))
    options.excluded_columns_in_all_tables.update(
        _string_list(raw, "excluded_columns_in_all_tables", source)
    )

    excluded_columns = raw.get("excluded_columns") or {}
    if not isinstance(excluded_columns, dict):
        raise EquivalencyConfigError(
            ErrorCodes.INVALID_OPTION, option="excluded_columns", value=excluded_columns,
        )
    for table_name, column_names in excluded_columns.items():
        if not isinstance(column_names, list):
            raise EquivalencyConfigError(
                ErrorCodes.INVALID_OPTION, option=f"excluded_columns.{table_name}", value=column_names,
            )
        options.excluding_columns(str(table_name), *(str(c) for c in column_names))

    options.validate()
    return options


def _string_list(raw: dict[str, Any], key: str, source: str) -> list[str]:
    value = raw.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise EquivalencyConfigError(ErrorCodes.INVALID_OPTION, option=key, value=value, source=source)
    return [str(item) for item in value]
