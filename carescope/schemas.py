"""
CareScope - Nurse Delegation Data Schemas
Pydantic models for communities, residents, med-techs, delegations and documents
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, computed_field
from typing import Optional, List, Dict
from datetime import datetime, date
from enum import Enum


# ============================================================================
# Enumerations
# ============================================================================

class DelegationStatus(str, Enum):
    """Stored delegation status"""
    ACTIVE = "active"
    RESCINDED = "rescinded"


class DerivedStatus(str, Enum):
    """Display status computed from stored status and today's date"""
    RESCINDED = "rescinded"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    IN_GOOD_STANDING = "in-good-standing"


class SupervisionStatus(str, Enum):
    """Personal-observation due status"""
    NO_DUE_DATE = "no-due-date"
    OVERDUE = "supervision-overdue"
    DUE = "supervision-due"
    OK = "supervision-ok"


class AssessmentType(str, Enum):
    """RN assessment types"""
    INITIAL = "Initial"
    QUARTERLY = "Quarterly"
    CHANGE_OF_CONDITION = "Change of Condition"


class AssessmentStatus(str, Enum):
    """Resident stability as of the most recent assessment"""
    PENDING = "Pending"
    STABLE = "Stable"
    UNSTABLE = "Unstable"


class AssessmentDueStatus(str, Enum):
    """Next-assessment due status"""
    INITIAL_NEEDED = "initial-assessment-needed"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    CURRENT = "current"


class AuditAction(str, Enum):
    """Delegation audit trail actions"""
    CREATED = "CREATED"
    REAUTHORIZED = "REAUTHORIZED"
    SUPERVISION_LOGGED = "SUPERVISION_LOGGED"
    SIGNED = "SIGNED"
    RESCINDED = "RESCINDED"


class SignatureMethod(str, Enum):
    """How a signature was captured"""
    TYPED = "TYPED"
    DRAWN = "DRAWN"


class StatusFilter(str, Enum):
    """Dashboard listing filters"""
    ALL = "all"
    ACTIVE = "active"
    DUE_SOON = "dueSoon"
    OVERDUE = "overdue"
    SUPERVISION_DUE = "supervisionDue"
    UNSIGNED = "unsigned"


# ============================================================================
# Community Models
# ============================================================================

class ContactInfo(BaseModel):
    """Name and contact details for a facility role"""
    name: str = ""
    email: str = ""
    phone: str = ""


class NotificationContacts(BaseModel):
    """Regional contacts notified about delegation events"""
    regional_ops: str = ""
    regional_nurse: str = ""


class Community(BaseModel):
    """Assisted-living or memory-care facility"""
    id: str
    name: str
    admin: ContactInfo = Field(default_factory=ContactInfo)
    rn: ContactInfo = Field(default_factory=ContactInfo, description="Designated RN, default signer")
    notifications: NotificationContacts = Field(default_factory=NotificationContacts)


class CommunityCreate(BaseModel):
    """Community creation payload"""
    name: str = ""
    admin: ContactInfo = Field(default_factory=ContactInfo)
    rn: ContactInfo = Field(default_factory=ContactInfo)
    notifications: NotificationContacts = Field(default_factory=NotificationContacts)


class CommunityUpdate(BaseModel):
    """Partial community update"""
    name: Optional[str] = None
    admin: Optional[ContactInfo] = None
    rn: Optional[ContactInfo] = None
    notifications: Optional[NotificationContacts] = None


# ============================================================================
# Resident & Assessment Models
# ============================================================================

class Assessment(BaseModel):
    """Immutable RN stability evaluation"""
    model_config = ConfigDict(frozen=True)

    assessment_date: date
    type: AssessmentType
    stable: bool
    notes: str = ""
    next_due: Optional[date] = None


class Resident(BaseModel):
    """Care recipient"""
    id: str
    community_id: str
    name: str
    dob: Optional[date] = None
    unit: str = ""
    diagnosis: str = ""
    regimen: str = ""
    assessment_status: AssessmentStatus = AssessmentStatus.PENDING
    last_assessment_date: Optional[date] = None
    next_assessment_date: Optional[date] = Field(None, description="Explicit next-due override")
    assessments: List[Assessment] = Field(default_factory=list, description="Newest first")


class ResidentCreate(BaseModel):
    """Resident creation payload"""
    community_id: str
    name: str = ""
    dob: Optional[date] = None
    unit: str = ""
    diagnosis: str = ""
    regimen: str = ""


class ResidentUpdate(BaseModel):
    """Demographic changes; assessment history is not editable here"""
    community_id: Optional[str] = None
    name: Optional[str] = None
    dob: Optional[date] = None
    unit: Optional[str] = None
    diagnosis: Optional[str] = None
    regimen: Optional[str] = None


class AssessmentRequest(BaseModel):
    """Input for logging a resident assessment"""
    assessment_date: Optional[date] = Field(None, description="Defaults to today")
    type: AssessmentType = AssessmentType.QUARTERLY
    stable: bool = True
    notes: str = ""
    next_due: Optional[date] = Field(None, description="Required for Change of Condition")


# ============================================================================
# Med-Tech Models
# ============================================================================

class DelegationProfile(BaseModel):
    """Reusable justification fragments for a med-tech"""
    rn_worked_with_employee_length: str = ""
    insulin_experience_community: str = ""
    insulin_experience_career: str = ""
    willingness_description: str = ""


class TrainingRecord(BaseModel):
    """Immutable training transcript entry"""
    model_config = ConfigDict(frozen=True)

    training_date: date
    topic: str
    notes: str = ""


class MedTech(BaseModel):
    """Unlicensed care worker receiving delegations"""
    id: str
    community_id: str
    name: str
    hire_date: Optional[date] = None
    experience: str = ""
    training: str = ""
    willingness: Optional[bool] = None
    last_supervision: Optional[date] = None
    training_transcript: List[TrainingRecord] = Field(default_factory=list, description="Newest first")
    delegation_profile: DelegationProfile = Field(default_factory=DelegationProfile)


class MedTechCreate(BaseModel):
    """Med-tech creation payload"""
    community_id: str
    name: str = ""
    experience: str = ""
    training: str = ""
    willingness: Optional[bool] = None
    delegation_profile: DelegationProfile = Field(default_factory=DelegationProfile)


class TrainingMethods(BaseModel):
    """Methods used during a logged training session"""
    carescope_course: bool = False
    lecture: bool = False
    discussion: bool = False
    demonstration: bool = False
    packet_reviewed: bool = False
    other: bool = False
    other_narrative: str = ""


class TrainingLogRequest(BaseModel):
    """Training applied to one or more med-techs"""
    med_tech_ids: List[str] = Field(default_factory=list)
    training_date: Optional[date] = None
    topic: str = ""
    notes: str = ""
    methods: TrainingMethods = Field(default_factory=TrainingMethods)


class MedTechSupervisionRequest(BaseModel):
    """RN supervision visit for a med-tech"""
    supervision_date: Optional[date] = None
    notes: str = ""


# ============================================================================
# Task Catalog Models
# ============================================================================

class DelegationTask(BaseModel):
    """Static catalog entry for a delegable task"""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    form_template: str


class TaskPacketTemplate(BaseModel):
    """Procedure packet printed with a delegation"""
    model_config = ConfigDict(frozen=True)

    title: str
    steps: List[str] = Field(default_factory=list)
    watch_for: List[str] = Field(default_factory=list)
    action_if_occurs: List[str] = Field(default_factory=list)


# ============================================================================
# Delegation Sub-structures
# ============================================================================

class DelegationChecklist(BaseModel):
    """Seven required attestations"""
    stable_condition: bool = False
    safe_environment: bool = False
    uap_skills: bool = False
    uap_willing: bool = False
    rn_available: bool = False
    written_instructions: bool = False
    non_transferable: bool = False


class CompetencyMethods(BaseModel):
    """How the delegate's competency was verified"""
    lecture: bool = False
    discussion: bool = False
    demonstration: bool = False
    return_demonstration: bool = False
    packet_reviewed: bool = False
    other: bool = False


class JustificationFields(BaseModel):
    """Six structured narrative fields behind a delegation"""
    rn_worked_with_employee_length: str = ""
    training_method_and_rationale: str = ""
    insulin_experience_community: str = ""
    insulin_experience_career: str = ""
    resident_work_and_knowledge: str = ""
    willingness_description: str = ""


class SupervisionMethods(BaseModel):
    """Observation methods used during a supervision visit"""
    supervision: bool = False
    discussion: bool = False
    demonstration: bool = False
    return_demonstration: bool = False
    lecture: bool = False
    packet_reviewed: bool = False
    written_test: bool = False
    verbal_test: bool = False
    other: bool = False
    other_narrative: str = ""


class SignatureRecord(BaseModel):
    """Immutable signature stamp"""
    model_config = ConfigDict(frozen=True)

    signed_at: datetime
    typed_name: str
    signature_image: Optional[str] = Field(None, description="Opaque image reference from signature capture")
    method: SignatureMethod = SignatureMethod.TYPED


class DelegationSignatures(BaseModel):
    """RN and med-tech signature slots"""
    rn: Optional[SignatureRecord] = None
    mt: Optional[SignatureRecord] = None

    @computed_field
    @property
    def is_complete(self) -> bool:
        """Both parties have signed"""
        return self.rn is not None and self.mt is not None


class AuditEntry(BaseModel):
    """Immutable audit trail entry"""
    model_config = ConfigDict(frozen=True)

    at: datetime
    action: AuditAction
    detail: str = ""


class SupervisionRecord(BaseModel):
    """Immutable record of a personal observation"""
    model_config = ConfigDict(frozen=True)

    supervision_date: date
    methods: SupervisionMethods


# ============================================================================
# Delegation Models
# ============================================================================

class Delegation(BaseModel):
    """Time-bounded authorization of one task for one resident and med-tech"""
    id: str
    resident_id: str
    med_tech_id: str
    task_id: str

    start_date: date
    end_date: date
    initial_start_date: date
    auth_days: int = Field(..., ge=1)

    status: DelegationStatus = DelegationStatus.ACTIVE
    checklist: DelegationChecklist = Field(default_factory=DelegationChecklist)
    competency_methods: CompetencyMethods = Field(default_factory=CompetencyMethods)
    justification: JustificationFields = Field(default_factory=JustificationFields)
    auth_justification: str = ""

    supervision_due_date: Optional[date] = None
    supervision_history: List[SupervisionRecord] = Field(default_factory=list)

    delegating_rn_name: str = ""
    signatures: DelegationSignatures = Field(default_factory=DelegationSignatures)
    audit: List[AuditEntry] = Field(default_factory=list)

    rescind_reason: Optional[str] = None
    rescind_date: Optional[date] = None
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == DelegationStatus.ACTIVE


class CreateDelegationRequest(BaseModel):
    """Input for creating one delegation per selected task"""
    resident_id: Optional[str] = None
    med_tech_id: Optional[str] = None
    task_ids: List[str] = Field(default_factory=list)
    auth_days: Optional[int] = Field(None, description="Clamped to the allowed window")
    checklist: DelegationChecklist = Field(default_factory=DelegationChecklist)
    competency_methods: CompetencyMethods = Field(default_factory=CompetencyMethods)
    justification: JustificationFields = Field(default_factory=JustificationFields)

    @field_validator("task_ids")
    @classmethod
    def dedupe_task_ids(cls, v: List[str]) -> List[str]:
        """Drop repeated task ids, keeping first-seen order"""
        return list(dict.fromkeys(v))


class CreateDelegationResult(BaseModel):
    """Created delegations plus non-blocking advisories"""
    delegations: List[Delegation] = Field(default_factory=list)
    advisories: List[str] = Field(default_factory=list)


class ReauthorizeRequest(BaseModel):
    """Input for extending an active delegation"""
    auth_days: Optional[int] = None
    criteria_unchanged: bool = True
    justification: Optional[JustificationFields] = None


class RescindRequest(BaseModel):
    """Input for rescinding a delegation"""
    reason: str = ""


class SupervisionRequest(BaseModel):
    """Input for logging a personal observation"""
    methods: SupervisionMethods = Field(default_factory=SupervisionMethods)


class SignatureRequest(BaseModel):
    """Input for the joint RN / med-tech signing ceremony"""
    rn_name: str = ""
    rn_signature: Optional[str] = None
    mt_name: str = ""
    mt_signature: Optional[str] = None


class DelegationView(BaseModel):
    """Delegation with its derived display state"""
    delegation: Delegation
    status: DerivedStatus
    supervision_status: SupervisionStatus
    days_until_end: int
    days_until_supervision: Optional[int] = None
    is_signed: bool


class DelegationGroup(BaseModel):
    """Delegations sharing a resident and med-tech"""
    resident_id: str
    med_tech_id: str
    delegations: List[Delegation] = Field(default_factory=list)


# ============================================================================
# Reporting Models
# ============================================================================

class DelegationFilter(BaseModel):
    """Community and text filters applied before aggregation"""
    community_id: Optional[str] = Field(None, description="None or 'all' selects every community")
    query: str = ""

    @property
    def all_communities(self) -> bool:
        return not self.community_id or self.community_id == "all"


class DashboardStats(BaseModel):
    """Dashboard counts, recomputed on every read"""
    active: int = 0
    due_soon: int = 0
    overdue: int = 0
    supervision_due: int = 0
    unsigned: int = 0
    total: int = 0


# ============================================================================
# Document Models
# ============================================================================

class JustificationClause(BaseModel):
    """Printed question and answer"""
    question: str
    answer: str = ""


class SignatureBlock(BaseModel):
    """Printed signature line"""
    role: str
    typed_name: str = ""
    signature_image: Optional[str] = None


class DelegationPacket(BaseModel):
    """Regulatory record of a delegation, ready for printing"""
    title: str
    resident_name: str = ""
    resident_dob: str = ""
    regimen: str = ""
    med_tech_name: str = ""
    task_label: str = ""
    auth_ends: str = ""
    checklist: Dict[str, str] = Field(default_factory=dict, description="Label -> YES/NO")
    procedure_title: str = ""
    procedure_steps: List[str] = Field(default_factory=list)
    watch_for: List[str] = Field(default_factory=list)
    action_if_occurs: List[str] = Field(default_factory=list)
    competency: Dict[str, str] = Field(default_factory=dict, description="Label -> Y/N")
    justification: List[JustificationClause] = Field(default_factory=list)
    statement: str = ""
    signatures: List[SignatureBlock] = Field(default_factory=list)


class AssessmentReport(BaseModel):
    """Printable assessment narrative"""
    title: str = "RN Diabetic Assessment"
    resident_name: str = ""
    assessment_date: str = ""
    type: str = ""
    status: str = ""
    narrative: str = ""


class TrainingTranscriptReport(BaseModel):
    """Printable training transcript"""
    title: str = "Training Transcript"
    med_tech_name: str = ""
    community_name: str = ""
    columns: List[str] = Field(default_factory=lambda: ["Date", "Topic", "Notes"])
    rows: List[List[str]] = Field(default_factory=list)
