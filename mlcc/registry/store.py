"""
Registry store and wildcard lookup.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Pattern, Tuple, TypeVar
import re

from mlcc.core.enums import AcceleratorType, MatchType
from .entries import FrameworkEntry, InstanceEntry, ModelEntry, freeze_mapping

E = TypeVar('E')

WILDCARD = '*'


def compile_wildcard(pattern: str) -> Pattern:
    """
    Compile a wildcard key into an anchored, case-insensitive regex.

    Every character other than ``*`` is literal; ``*`` matches any sequence.
    """
    body = '.*'.join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(f'^{body}$', re.IGNORECASE)


@dataclass(frozen=True)
class RegistryMatch(Generic[E]):
    """A lookup hit and how it was obtained."""
    entry: E
    match_type: MatchType
    matched_key: str


class PatternTable(Generic[E]):
    """
    Ordered lookup table whose keys may contain ``*`` wildcards.

    Exact keys are tried first. Otherwise wildcard keys are tried in declared
    order and the first one that matches wins; a later, more specific pattern
    never takes precedence over an earlier one.
    """

    def __init__(self, items: Iterable[Tuple[str, E]] = ()):
        self._exact: Dict[str, E] = {}
        self._patterns: List[Tuple[str, Pattern, E]] = []
        self._order: List[str] = []
        for key, entry in items:
            self._order.append(key)
            if WILDCARD in key:
                self._patterns.append((key, compile_wildcard(key), entry))
            else:
                self._exact[key] = entry

    def match(self, key: Optional[str]) -> Optional[RegistryMatch[E]]:
        if not key:
            return None
        if key in self._exact:
            return RegistryMatch(self._exact[key], MatchType.EXACT, key)
        for pattern_key, matcher, entry in self._patterns:
            if matcher.match(key):
                return RegistryMatch(entry, MatchType.PATTERN, pattern_key)
        return None

    def lookup(self, key: Optional[str]) -> Optional[E]:
        found = self.match(key)
        return found.entry if found else None

    def keys(self) -> List[str]:
        return list(self._order)

    def patterns(self) -> List[str]:
        return [key for key, _, _ in self._patterns]

    def __contains__(self, key) -> bool:
        return self.match(key) is not None

    def __len__(self):
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)


class RegistryStore:
    """
    Read-only view over the framework, model and instance registries.

    Lookups return None on a miss. Framework lookups are exact on
    (framework, version); there is no fallback to another version.
    """

    def __init__(self,
                 frameworks: Mapping[Tuple[str, str], FrameworkEntry],
                 models: PatternTable,
                 instances: Mapping[str, InstanceEntry],
                 known_flags: Optional[Mapping[str, Any]] = None,
                 community_reports: Optional[Mapping[str, Any]] = None):
        self._frameworks = freeze_mapping(frameworks)
        self._models = models
        self._instances = freeze_mapping(instances)
        self._known_flags = freeze_mapping(known_flags)
        self._community_reports = freeze_mapping(community_reports)

    @property
    def frameworks(self) -> Mapping[Tuple[str, str], FrameworkEntry]:
        return self._frameworks

    @property
    def models(self) -> PatternTable:
        return self._models

    @property
    def instances(self) -> Mapping[str, InstanceEntry]:
        return self._instances

    @property
    def known_flags(self) -> Mapping[str, Any]:
        return self._known_flags

    @property
    def community_reports(self) -> Mapping[str, Any]:
        return self._community_reports

    def get_framework(self, framework: Optional[str], version: Optional[str]) -> Optional[FrameworkEntry]:
        if framework is None or version is None:
            return None
        return self._frameworks.get((framework, str(version)))

    def get_model(self, model_id: Optional[str]) -> Optional[ModelEntry]:
        return self._models.lookup(model_id)

    def match_model(self, model_id: Optional[str]) -> Optional[RegistryMatch[ModelEntry]]:
        return self._models.match(model_id)

    def get_instance(self, instance_type: Optional[str]) -> Optional[InstanceEntry]:
        if instance_type is None:
            return None
        return self._instances.get(instance_type)

    def list_frameworks(self) -> List[str]:
        seen: Dict[str, None] = {}
        for framework, _ in self._frameworks:
            seen.setdefault(framework, None)
        return list(seen)

    def list_versions(self, framework: str) -> List[str]:
        return [version for name, version in self._frameworks if name == framework]

    def instances_for_accelerator(self, accelerator_type: AcceleratorType) -> List[InstanceEntry]:
        return [entry for entry in self._instances.values() if entry.accelerator.type is accelerator_type]
