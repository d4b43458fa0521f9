"""Read-only catalogs: domain registry, skill dictionary and role-level rules.

Catalogs are parsed once from the YAML files in ``jobscout/matching/data``
into frozen dataclasses. The ``default_*`` accessors cache the packaged
catalogs; callers that need different data load their own file and inject it
into the matchers.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml

from ..config.exceptions import ConfigurationError
from ..logging import get_logger

logger = get_logger(__name__, component="catalog")

DATA_DIR = Path(__file__).parent / "data"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Domain:
    """A professional specialization with detection keywords.

    Attributes:
        id: Stable identifier, e.g. ``backend-engineering``
        name: Display name
        category: Grouping such as ``engineering`` or ``design``
        keywords: Phrases searched for in postings
        cv_keywords: Phrases searched for in CVs
        required_count: Distinct keyword hits needed before the domain is detected
        transferable_to: Domain ids this domain's skills carry over to (directed)
    """

    id: str
    name: str
    category: str
    description: str = ""
    keywords: Tuple[str, ...] = ()
    cv_keywords: Tuple[str, ...] = ()
    required_count: int = 1
    transferable_to: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DomainRegistry:
    domains: Tuple[Domain, ...]
    categories: Tuple[Tuple[str, str], ...] = ()
    _index: Dict[str, Domain] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        self._index.update({domain.id: domain for domain in self.domains})

    def __iter__(self):
        return iter(self.domains)

    def __len__(self) -> int:
        return len(self.domains)

    def __contains__(self, domain_id: object) -> bool:
        return domain_id in self._index

    def get(self, domain_id: str) -> Optional[Domain]:
        return self._index.get(domain_id)

    @property
    def ids(self) -> List[str]:
        return [domain.id for domain in self.domains]

    def names(self, domain_ids: Iterable[str]) -> List[str]:
        """Resolve ids to display names, silently dropping unknown ids."""
        return [self._index[i].name for i in domain_ids if i in self._index]

    def by_category(self, category: str) -> List[Domain]:
        return [domain for domain in self.domains if domain.category == category]

    def is_transferable(self, from_id: str, to_id: str) -> bool:
        """True if ``from_id`` lists ``to_id`` as a transfer target."""
        source = self._index.get(from_id)
        return bool(source) and to_id in source.transferable_to


@dataclass(frozen=True)
class SkillEntry:
    name: str
    category: str
    synonyms: Tuple[str, ...]
    technical: bool = False


@dataclass(frozen=True)
class SkillDictionary:
    entries: Tuple[SkillEntry, ...]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def category_of(self, skill: str) -> str:
        for entry in self.entries:
            if entry.name == skill:
                return entry.category
        return "Other"

    @property
    def technical_categories(self) -> List[str]:
        seen: List[str] = []
        for entry in self.entries:
            if entry.technical and entry.category not in seen:
                seen.append(entry.category)
        return seen


@dataclass(frozen=True)
class RoleLevelPattern:
    """One seniority rule.

    ``title_patterns`` are only consulted when matching a headline (job title
    or CV current-position line).
    """

    level: str
    rank: int
    patterns: Tuple[str, ...] = ()
    title_patterns: Tuple[str, ...] = ()
    min_years: Optional[int] = None
    max_years: Optional[int] = None

    def accepts_years(self, years: int) -> bool:
        if self.min_years is None or years < self.min_years:
            return False
        return self.max_years is None or years <= self.max_years


@dataclass(frozen=True)
class RoleLevelRules:
    rules: Tuple[RoleLevelPattern, ...]

    def __iter__(self):
        return iter(self.rules)

    def rank(self, level: str) -> int:
        for rule in self.rules:
            if rule.level == level:
                return rule.rank
        raise KeyError(level)

    @property
    def levels(self) -> List[str]:
        """Level names ordered from least to most senior."""
        return [rule.level for rule in sorted(self.rules, key=lambda r: r.rank)]


def _read_catalog(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Catalog file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse catalog {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Catalog {path} must contain a mapping")
    return data


def _strings(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    return tuple(str(value) for value in (values or ()))


def load_domain_registry(path: PathLike = DATA_DIR / "domains.yaml") -> DomainRegistry:
    """Parse a domain registry file.

    Raises:
        ConfigurationError: If the file is missing, malformed or has duplicate ids
    """
    data = _read_catalog(path)
    domains = []
    seen = set()
    for raw in data.get("domains") or []:
        try:
            domain = Domain(
                id=str(raw["id"]),
                name=str(raw["name"]),
                category=str(raw["category"]),
                description=str(raw.get("description", "")),
                keywords=_strings(raw.get("keywords")),
                cv_keywords=_strings(raw.get("cv_keywords")),
                required_count=int(raw.get("required_count", 1)),
                transferable_to=_strings(raw.get("transferable_to")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid domain entry in {path}: {raw!r} ({e})")
        if domain.id in seen:
            raise ConfigurationError(f"Duplicate domain id in {path}: {domain.id}")
        if domain.required_count < 1:
            raise ConfigurationError(f"Domain {domain.id} must have required_count >= 1")
        seen.add(domain.id)
        domains.append(domain)

    categories = tuple((str(k), str(v)) for k, v in (data.get("categories") or {}).items())
    logger.debug(
        "Loaded domain registry",
        extra={"event": "catalog.domains.loaded", "path": str(path), "count": len(domains)},
    )
    return DomainRegistry(domains=tuple(domains), categories=categories)


def load_skill_dictionary(path: PathLike = DATA_DIR / "skills.yaml") -> SkillDictionary:
    """Parse a skill dictionary file into entries, preserving file order."""
    data = _read_catalog(path)
    entries = []
    for category in data.get("categories") or []:
        name = str(category.get("name", "Other"))
        technical = bool(category.get("technical", False))
        for skill, synonyms in (category.get("skills") or {}).items():
            entries.append(
                SkillEntry(
                    name=str(skill),
                    category=name,
                    synonyms=_strings(synonyms),
                    technical=technical,
                )
            )
    logger.debug(
        "Loaded skill dictionary",
        extra={"event": "catalog.skills.loaded", "path": str(path), "count": len(entries)},
    )
    return SkillDictionary(entries=tuple(entries))


def load_role_level_rules(path: PathLike = DATA_DIR / "role_levels.yaml") -> RoleLevelRules:
    """Parse role-level rules; file order is the matching priority."""
    data = _read_catalog(path)
    rules = []
    for raw in data.get("levels") or []:
        try:
            rules.append(
                RoleLevelPattern(
                    level=str(raw["level"]),
                    rank=int(raw["rank"]),
                    patterns=_strings(raw.get("patterns")),
                    title_patterns=_strings(raw.get("title_patterns")),
                    min_years=raw.get("min_years"),
                    max_years=raw.get("max_years"),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid role level entry in {path}: {raw!r} ({e})")
    if not rules:
        raise ConfigurationError(f"No role levels defined in {path}")
    return RoleLevelRules(rules=tuple(rules))


@lru_cache(maxsize=None)
def default_domain_registry() -> DomainRegistry:
    return load_domain_registry()


@lru_cache(maxsize=None)
def default_skill_dictionary() -> SkillDictionary:
    return load_skill_dictionary()


@lru_cache(maxsize=None)
def default_role_level_rules() -> RoleLevelRules:
    return load_role_level_rules()
