"""Orchestrator for a consolidation pass.

The ``Consolidator`` runs the stages of one pass in order: scan resources,
compute signatures, group, build the substitution map, sweep references,
then remove the duplicates nothing points at anymore.  All scan state lives
on the pass and in the returned report, never at module level, so passes
over different projects are independent.
"""

from __future__ import annotations

from typing import Dict, List, Optional, TYPE_CHECKING

from consolidator.dedup.grouping import build_equivalence_classes, build_substitution_map
from consolidator.dedup.removal import remove_duplicates, select_removable_duplicates
from consolidator.dedup.result import (
    ConsolidationReport,
    ItemFailure,
    SIGNATURE_UNAVAILABLE,
    SubstitutionJournal,
)
from consolidator.dedup.signature import SignatureStrategy, build_signature
from consolidator.dedup.substitution import apply_substitutions
from consolidator.errors import CollaboratorUnavailable, SignatureUnavailable
from consolidator.host.base import HostProject
from consolidator.models import ResourceDescriptor, ResourceKind
from consolidator.run_config import RunConfig
from consolidator.utils.logger import (
    log_debug,
    log_duplicate_group,
    log_error,
    log_info,
    log_pass_progress,
)

if TYPE_CHECKING:
    from consolidator.audit import AuditLog


class Consolidator:
    """Run one duplicate-consolidation pass over a host project.

    Args:
        project: Host collaborator.
        run_config: Per-pass settings.  Defaults to ``RunConfig()``.
        audit: Optional audit log receiving redirects, removals and the
            final summary.
        strategies: Signature strategies per resource kind, for hosts with
            custom descriptors.

    Usage::

        report = Consolidator(project, RunConfig.from_config(get_config())).run()
        print(report.summary())
    """

    def __init__(
        self,
        project: HostProject,
        run_config: Optional[RunConfig] = None,
        audit: Optional["AuditLog"] = None,
        strategies: Optional[Dict[ResourceKind, SignatureStrategy]] = None,
    ):
        self.project = project
        self.run_config = run_config or RunConfig()
        self.audit = audit
        self.strategies = strategies

    def _scan(self) -> List[ResourceDescriptor]:
        try:
            return list(self.project.list_resources())
        except Exception as e:
            log_error("Project resources unavailable", error=str(e))
            raise CollaboratorUnavailable(f"list_resources failed: {e}") from e

    def compute_signatures(
        self, descriptors: List[ResourceDescriptor], report: ConsolidationReport
    ) -> Dict[str, Optional[str]]:
        """Signature per descriptor id; failures are recorded on the report."""
        signatures: Dict[str, Optional[str]] = {}
        for descriptor in descriptors:
            try:
                signatures[descriptor.id] = build_signature(
                    descriptor, self.run_config, self.strategies
                )
            except SignatureUnavailable as e:
                signatures[descriptor.id] = None
                report.failures.append(ItemFailure(SIGNATURE_UNAVAILABLE, descriptor.id, e.reason))
            except Exception as e:
                signatures[descriptor.id] = None
                report.failures.append(ItemFailure(SIGNATURE_UNAVAILABLE, descriptor.id, str(e)))
        return signatures

    def run(self, journal: Optional[SubstitutionJournal] = None) -> ConsolidationReport:
        """Execute the pass.

        Args:
            journal: Redirect journal of an interrupted run of the same pass,
                e.g. rebuilt with ``journal_from_audit``.

        Returns:
            ``ConsolidationReport`` with per-item failures accumulated.

        Raises:
            CollaboratorUnavailable: when the project cannot list resources.
        """
        rc = self.run_config
        report = ConsolidationReport(pass_id=rc.pass_id, dry_run=rc.dry_run)
        log_pass_progress("Starting pass", pass_id=rc.pass_id, dry_run=rc.dry_run)

        descriptors = self._scan()
        report.resources_scanned = len(descriptors)
        if not descriptors:
            log_info("No resources to consolidate", pass_id=rc.pass_id)
            return report

        signatures = self.compute_signatures(descriptors, report)
        report.classes = build_equivalence_classes(descriptors, signatures=signatures)
        report.substitution_map = build_substitution_map(report.classes)
        log_pass_progress(
            "Signatures grouped",
            resources=len(descriptors),
            classes=len(report.classes),
            duplicates=report.duplicates_found,
            unavailable=len(report.failures),
        )

        for group in report.classes.values():
            if len(group) > 1:
                log_duplicate_group(group.canonical.id, [d.id for d in group.duplicates])

        if not report.substitution_map:
            log_info("No duplicates found", pass_id=rc.pass_id)
            self._finish(report)
            return report

        if rc.dry_run:
            log_info("Dry run: project left unchanged", duplicates=report.duplicates_found)
            self._finish(report)
            return report

        on_redirect = self.audit.record_redirect if self.audit is not None else None
        sweep = apply_substitutions(self.project, report.substitution_map, journal, on_redirect)
        report.references_replaced = sweep.replaced
        report.nodes_visited = sweep.visited
        report.journal = sweep.journal
        report.failures.extend(sweep.failures)
        log_pass_progress(
            "References redirected",
            replaced=sweep.replaced,
            visited=sweep.visited,
            conflicts=len(sweep.conflicts),
        )

        if rc.remove_duplicates:
            usage_counts = self._usage_counts(report)
            report.removable = select_removable_duplicates(report.substitution_map, usage_counts)
            on_removed = self.audit.record_removal if self.audit is not None else None
            removal = remove_duplicates(self.project, report.removable, on_removed)
            report.removed = removal.removed
            report.failures.extend(removal.failures)
        else:
            log_debug("Duplicate removal disabled for this pass", pass_id=rc.pass_id)

        self._finish(report)
        return report

    def _usage_counts(self, report: ConsolidationReport) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for duplicate_id in report.substitution_map:
            try:
                counts[duplicate_id] = self.project.get_usage_count(duplicate_id)
            except Exception as e:
                log_error("Usage count unavailable", resource_id=duplicate_id, error=str(e))
        return counts

    def _finish(self, report: ConsolidationReport) -> None:
        if self.audit is not None:
            self.audit.record_summary(report)
        log_pass_progress(
            "Pass finished",
            pass_id=report.pass_id,
            duplicates_found=report.duplicates_found,
            references_replaced=report.references_replaced,
            duplicates_removed=report.duplicates_removed,
            failures=len(report.failures),
        )
