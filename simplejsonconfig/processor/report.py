"""
Observable result of a discovery run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from simplejsonconfig.core.enums import SkipReason, InjectionOutcome


@dataclass(frozen=True)
class SkipRecord:
    """A configuration candidate that did not make it into the registry."""
    config_type: type
    name: str
    reason: SkipReason
    detail: str = ""
    path: Optional[Path] = None


@dataclass(frozen=True)
class InjectionRecord:
    """What happened to one autowired attribute."""
    owner: type
    field_name: str
    outcome: InjectionOutcome
    config_type: Optional[type] = None
    detail: str = ""


@dataclass
class DiscoveryReport:
    """Registered types, skipped candidates and injection outcomes of a run."""
    module_name: str
    registered: List[type] = field(default_factory=list)
    skipped: List[SkipRecord] = field(default_factory=list)
    injections: List[InjectionRecord] = field(default_factory=list)
    import_errors: List[str] = field(default_factory=list)

    @property
    def injected(self) -> List[InjectionRecord]:
        return self._with_outcome(InjectionOutcome.INJECTED)

    @property
    def unresolved(self) -> List[InjectionRecord]:
        """Eligible attributes whose configuration was never registered."""
        return self._with_outcome(InjectionOutcome.UNRESOLVED)

    @property
    def ignored(self) -> List[InjectionRecord]:
        return [r for r in self.injections
                if r.outcome in (InjectionOutcome.NOT_STATIC, InjectionOutcome.NOT_CONFIG_TYPE)]

    @property
    def ok(self) -> bool:
        """True when nothing was skipped and every eligible attribute was injected."""
        return not self.skipped and not self.unresolved and not self.import_errors

    def skip_for(self, config_type: type) -> Optional[SkipRecord]:
        for record in self.skipped:
            if record.config_type is config_type:
                return record
        return None

    def skipped_with(self, reason: SkipReason) -> List[SkipRecord]:
        return [r for r in self.skipped if r.reason is reason]

    def _with_outcome(self, outcome: InjectionOutcome) -> List[InjectionRecord]:
        return [r for r in self.injections if r.outcome is outcome]
