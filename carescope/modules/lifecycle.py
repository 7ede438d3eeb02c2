"""
CareScope Delegation Lifecycle Engine
Create, reauthorize, rescind, sign and supervise delegations; derive display status
"""

import logging
from typing import List, Optional
from datetime import date, datetime

from carescope.config import settings
from carescope.errors import DelegationStateError, DelegationValidationError
from carescope.schemas import (
    AssessmentDueStatus, AssessmentStatus, AuditAction, AuditEntry, CreateDelegationRequest,
    CreateDelegationResult, Delegation, DelegationStatus, DelegationView,
    DerivedStatus, JustificationFields, ReauthorizeRequest, Resident,
    SignatureMethod, SignatureRecord, SupervisionMethods, SupervisionRecord,
    SupervisionStatus
)
from carescope.modules.dates import add_days, clamp, days_between
from carescope.modules.justification import JustificationComposer
from carescope.modules.assessments import AssessmentTracker
from carescope.services import catalog
from carescope.services.clock import Clock, get_clock
from carescope.services.signatures import SignatureCapture
from carescope.services.stores import StoreRegistry, new_id

logger = logging.getLogger(__name__)

SUPERVISION_METHOD_LABELS = [
    ("supervision", "Supervision"),
    ("discussion", "Discussion"),
    ("demonstration", "Demonstration"),
    ("return_demonstration", "Return Demonstration"),
    ("lecture", "Lecture"),
    ("packet_reviewed", "Packet Reviewed"),
    ("written_test", "Written Test"),
    ("verbal_test", "Verbal Test"),
]


# =============================================================================
# Status Derivation
# =============================================================================

def days_until_end(delegation: Delegation, today: date) -> int:
    return days_between(today, delegation.end_date)


def days_until_supervision(delegation: Delegation, today: date) -> Optional[int]:
    if delegation.supervision_due_date is None:
        return None
    return days_between(today, delegation.supervision_due_date)


def derive_status(delegation: Delegation, today: date, due_soon_days: Optional[int] = None) -> DerivedStatus:
    """
    Display status; never stored

    Rescinded overrides everything. An active delegation past its end date is
    overdue, within the due-soon window it is due soon, otherwise in good standing.
    """
    if delegation.status == DelegationStatus.RESCINDED:
        return DerivedStatus.RESCINDED

    window = due_soon_days if due_soon_days is not None else settings.due_soon_days
    remaining = days_until_end(delegation, today)
    if remaining < 0:
        return DerivedStatus.OVERDUE
    if remaining <= window:
        return DerivedStatus.DUE_SOON
    return DerivedStatus.IN_GOOD_STANDING


def supervision_status(
    delegation: Delegation,
    today: date,
    window_days: Optional[int] = None
) -> SupervisionStatus:
    """Personal-observation badge"""
    remaining = days_until_supervision(delegation, today)
    if remaining is None:
        return SupervisionStatus.NO_DUE_DATE

    window = window_days if window_days is not None else settings.supervision_due_window_days
    if remaining < 0:
        return SupervisionStatus.OVERDUE
    if remaining <= window:
        return SupervisionStatus.DUE
    return SupervisionStatus.OK


def is_signed(delegation: Delegation) -> bool:
    """Both RN and med-tech signatures are on record"""
    return delegation.signatures.is_complete


def describe_delegation(delegation: Delegation, today: date) -> DelegationView:
    """Attach derived display state to a delegation"""
    return DelegationView(
        delegation=delegation,
        status=derive_status(delegation, today),
        supervision_status=supervision_status(delegation, today),
        days_until_end=days_until_end(delegation, today),
        days_until_supervision=days_until_supervision(delegation, today),
        is_signed=is_signed(delegation),
    )


def describe_supervision_methods(methods: SupervisionMethods) -> str:
    labels = [label for name, label in SUPERVISION_METHOD_LABELS if getattr(methods, name)]
    if methods.other:
        labels.append(f"Other: {methods.other_narrative}" if methods.other_narrative else "Other")
    return ", ".join(labels)


# =============================================================================
# Lifecycle Engine
# =============================================================================

class DelegationLifecycleEngine:
    """
    Owns every delegation state transition.

    Each operation reads the clock once and uses that instant for every date
    and timestamp it writes. Updates are built as copies and saved in one step,
    so a rejected operation leaves the stored record untouched.
    """

    def __init__(
        self,
        registry: StoreRegistry,
        clock: Optional[Clock] = None,
        min_auth_days: Optional[int] = None,
        max_auth_days: Optional[int] = None,
        default_auth_days: Optional[int] = None,
        initial_supervision_days: Optional[int] = None,
        supervision_reset_days: Optional[int] = None,
        rescind_appends_audit: Optional[bool] = None
    ):
        self.registry = registry
        self.clock = clock or get_clock()
        self.min_auth_days = min_auth_days if min_auth_days is not None else settings.min_auth_days
        self.max_auth_days = max_auth_days if max_auth_days is not None else settings.max_auth_days
        self.default_auth_days = (
            default_auth_days if default_auth_days is not None else settings.default_auth_days
        )
        self.initial_supervision_days = (
            initial_supervision_days if initial_supervision_days is not None
            else settings.initial_supervision_days
        )
        self.supervision_reset_days = (
            supervision_reset_days if supervision_reset_days is not None
            else settings.supervision_reset_days
        )
        self.rescind_appends_audit = (
            rescind_appends_audit if rescind_appends_audit is not None
            else settings.rescind_appends_audit
        )
        self.assessments = AssessmentTracker(registry.residents, clock=self.clock)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def clamp_auth_days(self, requested: Optional[int]) -> int:
        """Missing or zero requests use the default; anything else is clamped to the window"""
        value = requested if requested else self.default_auth_days
        return clamp(int(value), self.min_auth_days, self.max_auth_days)

    def community_rn_name(self, resident: Optional[Resident]) -> str:
        if resident is None:
            return ""
        community = self.registry.community_for_resident(resident)
        return community.rn.name if community else ""

    def get(self, delegation_id: str) -> Delegation:
        return self.registry.delegations.get(delegation_id)

    def _get_active(self, delegation_id: str, operation: str) -> Delegation:
        delegation = self.get(delegation_id)
        if delegation.status == DelegationStatus.RESCINDED:
            logger.warning(f"Rejected {operation} on rescinded delegation {delegation_id}")
            raise DelegationStateError(delegation_id, operation)
        return delegation

    @staticmethod
    def _with_audit(delegation: Delegation, at: datetime, action: AuditAction, detail: str, **changes) -> Delegation:
        entry = AuditEntry(at=at, action=action, detail=detail)
        changes["audit"] = [*delegation.audit, entry]
        return delegation.model_copy(update=changes)

    def _advisories(self, resident: Resident, today: date) -> List[str]:
        """Non-blocking recommendations drawn from the resident's assessment record"""
        notes = []
        if resident.assessment_status == AssessmentStatus.PENDING:
            notes.append("Resident has no RN assessment on record")
        elif not self.assessments.is_stable(resident):
            notes.append("Most recent RN assessment found the resident unstable")
        if resident.assessments and self.assessments.due_status(resident, today) == AssessmentDueStatus.OVERDUE:
            notes.append("Resident assessment is overdue")
        return notes

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def validate_create(self, request: CreateDelegationRequest) -> List[str]:
        """Every violation in the create request, in check order"""
        errors = []
        if not request.resident_id:
            errors.append("Resident is required")
        elif request.resident_id not in self.registry.residents:
            errors.append(f"Resident not found: {request.resident_id}")

        if not request.med_tech_id:
            errors.append("Med-Tech is required")
        elif request.med_tech_id not in self.registry.med_techs:
            errors.append(f"Med-Tech not found: {request.med_tech_id}")

        if not request.task_ids:
            errors.append("Select at least one task")
        for task_id in request.task_ids:
            if catalog.find_task(task_id) is None:
                errors.append(f"Unknown task: {task_id}")

        if not request.checklist.stable_condition:
            errors.append("Resident must be marked Stable & Predictable")

        errors.extend(JustificationComposer.missing_fields(request.justification))
        return errors

    def create(self, request: CreateDelegationRequest) -> CreateDelegationResult:
        """
        Create one delegation per selected task

        Args:
            request: Resident, med-tech, task ids, requested days, attestations, justification

        Returns:
            Created delegations (request task order) and assessment advisories

        Raises:
            DelegationValidationError: Any required input missing; nothing is created
        """
        errors = self.validate_create(request)
        if errors:
            logger.warning(f"Delegation create rejected: {errors}")
            raise DelegationValidationError(errors)

        now = self.clock.now()
        today = now.date()
        resident = self.registry.residents.get(request.resident_id)
        auth_days = self.clamp_auth_days(request.auth_days)
        rn_name = self.community_rn_name(resident)

        auth_justification = JustificationComposer.compose(
            rn_name, auth_days, request.checklist.stable_condition, request.justification
        )

        created = []
        for task_id in request.task_ids:
            delegation = Delegation(
                id=new_id("dlg"),
                resident_id=request.resident_id,
                med_tech_id=request.med_tech_id,
                task_id=task_id,
                start_date=today,
                end_date=add_days(today, auth_days),
                initial_start_date=today,
                auth_days=auth_days,
                checklist=request.checklist.model_copy(),
                competency_methods=request.competency_methods.model_copy(),
                justification=request.justification.model_copy(),
                auth_justification=auth_justification,
                supervision_due_date=add_days(today, self.initial_supervision_days),
                delegating_rn_name=rn_name,
                audit=[AuditEntry(at=now, action=AuditAction.CREATED, detail=f"Initial Auth {auth_days} days")],
                created_at=now,
            )
            self.registry.delegations.save(delegation)
            created.append(delegation)
            logger.info(f"Created delegation {delegation.id} ({task_id}) for {auth_days} days")

        return CreateDelegationResult(delegations=created, advisories=self._advisories(resident, today))

    # -------------------------------------------------------------------------
    # Reauthorize
    # -------------------------------------------------------------------------

    def reauthorize(self, delegation_id: str, request: ReauthorizeRequest) -> Delegation:
        """
        Extend an active delegation from today

        With criteria unchanged the stored justification is kept verbatim;
        otherwise the supplied fields replace it in full, blanks included.

        Raises:
            NotFoundError: Unknown delegation
            DelegationStateError: Delegation is rescinded
        """
        delegation = self._get_active(delegation_id, "reauthorize")

        if request.criteria_unchanged:
            fields = delegation.justification
        else:
            fields = request.justification or JustificationFields()

        now = self.clock.now()
        today = now.date()
        auth_days = self.clamp_auth_days(request.auth_days)

        resident = self.registry.residents.find(delegation.resident_id)
        rn_name = delegation.delegating_rn_name or self.community_rn_name(resident)
        criteria_note = "criteria unchanged" if request.criteria_unchanged else "criteria updated"

        updated = self._with_audit(
            delegation, now, AuditAction.REAUTHORIZED, f"Extended {auth_days} days ({criteria_note})",
            start_date=today,
            end_date=add_days(today, auth_days),
            auth_days=auth_days,
            justification=fields.model_copy(),
            auth_justification=JustificationComposer.compose(
                rn_name, auth_days, delegation.checklist.stable_condition, fields
            ),
            supervision_due_date=add_days(today, min(auth_days, self.max_auth_days)),
            delegating_rn_name=rn_name,
        )
        self.registry.delegations.save(updated)
        logger.info(f"Reauthorized delegation {delegation_id} for {auth_days} days ({criteria_note})")
        return updated

    # -------------------------------------------------------------------------
    # Rescind
    # -------------------------------------------------------------------------

    def rescind(self, delegation_id: str, reason: str) -> Delegation:
        """
        Terminate a delegation permanently

        Raises:
            NotFoundError: Unknown delegation
            DelegationStateError: Already rescinded; the first rescind date stands
            DelegationValidationError: Blank reason
        """
        delegation = self._get_active(delegation_id, "rescind")
        reason = (reason or "").strip()
        if not reason:
            raise DelegationValidationError(["Rescind reason is required"])

        now = self.clock.now()
        changes = {
            "status": DelegationStatus.RESCINDED,
            "rescind_reason": reason,
            "rescind_date": now.date(),
        }
        if self.rescind_appends_audit:
            updated = self._with_audit(delegation, now, AuditAction.RESCINDED, f"Rescinded: {reason}", **changes)
        else:
            updated = delegation.model_copy(update=changes)

        self.registry.delegations.save(updated)
        logger.info(f"Rescinded delegation {delegation_id}: {reason}")
        return updated

    # -------------------------------------------------------------------------
    # Supervision
    # -------------------------------------------------------------------------

    def log_supervision(self, delegation_id: str, methods: Optional[SupervisionMethods] = None) -> Delegation:
        """
        Record a personal observation and push the supervision due date out

        Raises:
            NotFoundError: Unknown delegation
            DelegationStateError: Delegation is rescinded
        """
        delegation = self._get_active(delegation_id, "log supervision")
        methods = methods or SupervisionMethods()

        now = self.clock.now()
        today = now.date()
        described = describe_supervision_methods(methods)
        detail = f"Personal observation: {described}" if described else "Personal observation logged"

        updated = self._with_audit(
            delegation, now, AuditAction.SUPERVISION_LOGGED, detail,
            supervision_due_date=add_days(today, self.supervision_reset_days),
            supervision_history=[
                *delegation.supervision_history,
                SupervisionRecord(supervision_date=today, methods=methods.model_copy()),
            ],
        )
        self.registry.delegations.save(updated)
        logger.info(f"Logged supervision on delegation {delegation_id}; next due {updated.supervision_due_date}")
        return updated

    # -------------------------------------------------------------------------
    # Signatures
    # -------------------------------------------------------------------------

    def record_signatures(
        self,
        delegation_id: str,
        rn_name: str,
        rn_signature: Optional[str] = None,
        mt_name: str = "",
        mt_signature: Optional[str] = None
    ) -> Delegation:
        """
        Stamp RN and med-tech signatures in one ceremony with a shared timestamp

        A blank RN name keeps the signer of record; a blank med-tech name
        falls back to the delegate's name on file.

        Args:
            delegation_id: Delegation being signed
            rn_name: RN typed name; replaces the signer of record when given
            rn_signature: Optional opaque RN signature image reference
            mt_name: Med-tech typed name
            mt_signature: Optional opaque med-tech signature image reference

        Raises:
            NotFoundError: Unknown delegation
            DelegationStateError: Delegation is rescinded
        """
        delegation = self._get_active(delegation_id, "sign")
        rn_name = (rn_name or "").strip() or delegation.delegating_rn_name
        mt_name = (mt_name or "").strip()
        if not mt_name:
            med_tech = self.registry.med_techs.find(delegation.med_tech_id)
            mt_name = med_tech.name if med_tech else ""

        now = self.clock.now()
        rn_record = SignatureRecord(
            signed_at=now,
            typed_name=rn_name,
            signature_image=rn_signature or None,
            method=SignatureMethod.DRAWN if rn_signature else SignatureMethod.TYPED,
        )
        mt_record = SignatureRecord(
            signed_at=now,
            typed_name=mt_name,
            signature_image=mt_signature or None,
            method=SignatureMethod.DRAWN if mt_signature else SignatureMethod.TYPED,
        )

        updated = self._with_audit(
            delegation, now, AuditAction.SIGNED, f"Signed by RN {rn_name} and Med-Tech {mt_name}",
            signatures=delegation.signatures.model_copy(update={"rn": rn_record, "mt": mt_record}),
            delegating_rn_name=rn_name,
        )
        self.registry.delegations.save(updated)
        logger.info(f"Recorded signatures on delegation {delegation_id}")
        return updated

    def capture_signatures(
        self,
        delegation_id: str,
        rn_name: str,
        mt_name: str,
        capture: SignatureCapture
    ) -> Delegation:
        """Run a capture session per signer, then record both signatures"""
        self._get_active(delegation_id, "sign")
        rn_image = capture.capture("rn", rn_name)
        mt_image = capture.capture("mt", mt_name)
        return self.record_signatures(delegation_id, rn_name, rn_image, mt_name, mt_image)


# =============================================================================
# Public API
# =============================================================================

def create_delegations(
    registry: StoreRegistry,
    request: CreateDelegationRequest,
    clock: Optional[Clock] = None
) -> CreateDelegationResult:
    """Create delegations for every task in the request"""
    engine = DelegationLifecycleEngine(registry, clock=clock)
    return engine.create(request)
