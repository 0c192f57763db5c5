"""Persistence and editing of user-defined target allocations."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import TypeAdapter, ValidationError
from .exceptions import InvalidTargetsError
from .models import AllocationTarget

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "rebalancer_targets"
TARGET_SUM_TOLERANCE = 0.01

_targets_adapter = TypeAdapter(List[AllocationTarget])


@dataclass
class TargetIssue:
    code: str
    message: str


def validate_target_set(targets: List[AllocationTarget]) -> List[TargetIssue]:
    """Check a target set before it is saved. An empty set is valid."""
    issues = []
    if not targets:
        return issues

    total = sum(t.target for t in targets)
    if abs(total - 100) >= TARGET_SUM_TOLERANCE:
        issues.append(TargetIssue(
            code="invalid_target_sum",
            message=f"Targets sum to {total:.2f}%, expected 100%"
        ))

    seen = set()
    for target in targets:
        if target.asset_class in seen:
            issues.append(TargetIssue(
                code="duplicate_asset_class",
                message=f'Asset class "{target.asset_class}" has more than one target'
            ))
        seen.add(target.asset_class)

    return issues


def upsert_target(targets: List[AllocationTarget], asset_class: str, target: float) -> List[AllocationTarget]:
    """Return a copy with the target for asset_class updated in place, or appended"""
    new_target = AllocationTarget(asset_class=asset_class, target=target)
    updated = list(targets)
    for i, existing in enumerate(updated):
        if existing.asset_class == asset_class:
            updated[i] = new_target
            return updated
    updated.append(new_target)
    return updated


def remove_target(targets: List[AllocationTarget], asset_class: str) -> List[AllocationTarget]:
    return [t for t in targets if t.asset_class != asset_class]


class TargetStore(ABC):
    """Key-value persistence for the target list; reads see prior writes"""

    @abstractmethod
    def load(self) -> List[AllocationTarget]:
        pass

    @abstractmethod
    def _write(self, targets: List[AllocationTarget]) -> None:
        pass

    def save(self, targets: List[AllocationTarget]) -> List[AllocationTarget]:
        """
        Validate and persist targets.

        Raises:
            InvalidTargetsError: If the set does not sum to 100 or repeats an asset class
        """
        issues = validate_target_set(targets)
        if issues:
            raise InvalidTargetsError(issues)
        return self.save_unchecked(targets)

    def save_unchecked(self, targets: List[AllocationTarget]) -> List[AllocationTarget]:
        """Persist targets as-is, e.g. while a set is still being edited"""
        self._write(list(targets))
        logger.debug(f"Saved {len(targets)} allocation targets")
        return list(targets)

    def clear(self) -> None:
        self._write([])
        logger.debug("Cleared allocation targets")


class InMemoryTargetStore(TargetStore):

    def __init__(self, targets: Optional[List[AllocationTarget]] = None):
        self._targets: List[AllocationTarget] = list(targets or [])

    def load(self) -> List[AllocationTarget]:
        return list(self._targets)

    def _write(self, targets: List[AllocationTarget]) -> None:
        self._targets = list(targets)


class JsonFileTargetStore(TargetStore):
    """
    Targets stored as a camelCase JSON list under a key in a JSON object file.

    Other keys in the file are preserved. A missing, unreadable or corrupt
    file loads as an empty target list.
    """

    def __init__(self, path: str | Path, key: str = DEFAULT_STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> Dict:
        if not self.path.exists():
            return {}
        with open(self.path, 'r') as f:
            document = json.load(f)
        if not isinstance(document, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return document

    def load(self) -> List[AllocationTarget]:
        try:
            stored = self._read_document().get(self.key)
            if stored is None:
                return []
            return _targets_adapter.validate_python(stored)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Failed to load allocation targets, using empty: {e}")
            return []

    def _write(self, targets: List[AllocationTarget]) -> None:
        try:
            document = self._read_document()
        except (OSError, ValueError) as e:
            logger.warning(f"Overwriting unreadable targets file {self.path}: {e}")
            document = {}

        document[self.key] = _targets_adapter.dump_python(targets, by_alias=True)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, 'w') as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save allocation targets: {e}")
            raise
