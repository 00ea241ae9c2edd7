"""Audit registry for collecting audits and running them together."""

from collections.abc import Mapping
from typing import Any

from pageaudit.core.logging import get_logger

from .base import Audit
from .models import AuditMeta, AuditResult, ScoreDisplayMode

logger = get_logger(__name__)


class AuditNotFoundError(Exception):
    """Raised when an audit name is not registered."""

    def __init__(self, audit_name: str) -> None:
        self.audit_name = audit_name
        super().__init__(f"Audit not found: {audit_name}")


class AuditRegistry:
    """
    Registry of audit classes keyed by their metadata name.

    Registration order is preserved and is the order ``run_all`` uses.
    """

    def __init__(self) -> None:
        self._audits: dict[str, type[Audit]] = {}

    def register(self, audit_class: type[Audit]) -> str:
        """
        Register an audit class.

        Args:
            audit_class: Audit class to register. It must be constructible
                without arguments.

        Returns:
            The audit name taken from the class metadata.

        Raises:
            ValueError: If another class is registered under the same name.
        """
        name = audit_class().meta.name
        existing = self._audits.get(name)
        if existing is not None and existing is not audit_class:
            raise ValueError(f"Audit {name} is already registered by {existing}")
        self._audits[name] = audit_class
        return name

    def unregister(self, audit_name: str) -> bool:
        """
        Unregister an audit.

        Returns:
            True if the audit was removed, False if it didn't exist.
        """
        return self._audits.pop(audit_name, None) is not None

    def get_audit_class(self, audit_name: str) -> type[Audit]:
        """
        Get the audit class registered under a name.

        Raises:
            AuditNotFoundError: If the audit is not registered.
        """
        if audit_name not in self._audits:
            raise AuditNotFoundError(audit_name)
        return self._audits[audit_name]

    def create(self, audit_name: str) -> Audit:
        """Create an instance of a registered audit."""
        return self.get_audit_class(audit_name)()

    def list_audits(self) -> list[str]:
        """List registered audit names in registration order."""
        return list(self._audits.keys())

    def is_registered(self, audit_name: str) -> bool:
        """Check if an audit name is registered."""
        return audit_name in self._audits

    def all_meta(self) -> list[AuditMeta]:
        """Return the metadata of every registered audit."""
        return [audit_class().meta for audit_class in self._audits.values()]

    def run_all(
        self,
        artifacts: Mapping[str, Any],
        default_display_mode: ScoreDisplayMode | None = None,
    ) -> dict[str, AuditResult]:
        """
        Run every registered audit against the same artifacts.

        Args:
            artifacts: Artifacts gathered for the page.
            default_display_mode: Display mode when an audit declares none;
            defaults to the configured scoring.default_display_mode.

        Returns:
            Mapping of audit name to its normalized result.
        """
        results: dict[str, AuditResult] = {}
        for name, audit_class in self._audits.items():
            results[name] = audit_class().run(artifacts, default_display_mode)

        errored = [name for name, result in results.items() if result.error]
        logger.debug("audits_completed", total=len(results), errored=errored)
        return results


_default_registry: AuditRegistry | None = None


def get_registry() -> AuditRegistry:
    """Get the global audit registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = AuditRegistry()
    return _default_registry
