"""
CareScope Document Builders
Delegation packet, assessment report and training transcript for the print consumer
"""

import logging
from typing import List, Optional

from carescope.config import settings
from carescope.errors import NotFoundError
from carescope.schemas import (
    Assessment, AssessmentReport, Community, Delegation, DelegationPacket,
    DelegationTask, JustificationClause, MedTech, Resident, SignatureBlock,
    SignatureRecord, TaskPacketTemplate, TrainingTranscriptReport
)
from carescope.modules.dates import days_between, format_date
from carescope.modules.justification import (
    JustificationComposer, JustificationPrompts, delegation_statement
)
from carescope.services import catalog
from carescope.services.stores import StoreRegistry

logger = logging.getLogger(__name__)

NO_RECORDS = "No records."


def yes_no(flag: bool) -> str:
    return "YES" if flag else "NO"


def y_n(flag: bool) -> str:
    return "Y" if flag else "N"


# =============================================================================
# Document Builder
# =============================================================================

class DocumentBuilder:
    """Pure builders; inputs are never modified"""

    @staticmethod
    def build_packet(
        community: Optional[Community],
        delegation: Delegation,
        resident: Optional[Resident],
        med_tech: Optional[MedTech],
        task: Optional[DelegationTask],
        packet_template: Optional[TaskPacketTemplate],
        rn_signature: Optional[SignatureRecord] = None,
        mt_signature: Optional[SignatureRecord] = None
    ) -> DelegationPacket:
        """
        Build the printable delegation packet

        Blank justification fields fall back to the med-tech's delegation
        profile. The statement signer is the RN signature's typed name, else
        the delegation's signer of record, else the community RN.

        Args:
            community: Facility (title and default RN)
            delegation: Delegation being printed
            resident: Delegated resident
            med_tech: Delegate
            task: Catalog task
            packet_template: Procedure packet for the task
            rn_signature: RN signature record, if signed
            mt_signature: Med-tech signature record, if signed

        Returns:
            Packet document
        """
        org_name = community.name if community else settings.organization_name
        org_rn_name = community.rn.name if community else ""
        checklist = delegation.checklist
        competency = delegation.competency_methods
        resolved = JustificationComposer.prefill_from_profile(delegation.justification, med_tech)

        auth_days = delegation.auth_days
        if not auth_days or auth_days <= 0:
            auth_days = max(0, days_between(delegation.start_date, delegation.end_date))

        signer = (
            (rn_signature.typed_name if rn_signature else "")
            or delegation.delegating_rn_name
            or org_rn_name
        )

        p = JustificationPrompts
        justification = [
            JustificationClause(question=p.RN_WORKED_WITH_EMPLOYEE, answer=resolved.rn_worked_with_employee_length),
            JustificationClause(question=p.TRAINING_METHOD, answer=resolved.training_method_and_rationale),
            JustificationClause(
                question=p.INSULIN_EXPERIENCE,
                answer="\n".join([
                    f"{p.WITHIN_COMMUNITY} {resolved.insulin_experience_community}",
                    f"{p.WITHIN_CAREER} {resolved.insulin_experience_career}",
                ]),
            ),
            JustificationClause(question=p.RESIDENT_KNOWLEDGE, answer=resolved.resident_work_and_knowledge),
            JustificationClause(question=p.WILLINGNESS, answer=resolved.willingness_description),
        ]

        packet = DelegationPacket(
            title=f"{org_name} — RN Delegation Packet",
            resident_name=resident.name if resident else "",
            resident_dob=resident.dob.isoformat() if resident and resident.dob else "",
            regimen=resident.regimen if resident else "",
            med_tech_name=med_tech.name if med_tech else "",
            task_label=task.label if task else "",
            auth_ends=format_date(delegation.end_date),
            checklist={
                "Stable": yes_no(checklist.stable_condition),
                "Safe Env": yes_no(checklist.safe_environment),
                "UAP Willing": yes_no(checklist.uap_willing),
                "UAP Skills": yes_no(checklist.uap_skills),
                "RN Available": yes_no(checklist.rn_available),
                "Written Instructions": yes_no(checklist.written_instructions),
                "Non-Transferable": yes_no(checklist.non_transferable),
            },
            procedure_title=packet_template.title if packet_template else "",
            procedure_steps=list(packet_template.steps) if packet_template else [],
            watch_for=list(packet_template.watch_for) if packet_template else [],
            action_if_occurs=list(packet_template.action_if_occurs) if packet_template else [],
            competency={
                "Lecture": y_n(competency.lecture),
                "Discussion": y_n(competency.discussion),
                "Demo": y_n(competency.demonstration),
                "Return Demo": y_n(competency.return_demonstration),
                "Packet Reviewed": y_n(competency.packet_reviewed),
            },
            justification=justification,
            statement=delegation_statement(signer, auth_days, checklist.stable_condition),
            signatures=[
                SignatureBlock(
                    role="MT",
                    typed_name=mt_signature.typed_name if mt_signature else "",
                    signature_image=mt_signature.signature_image if mt_signature else None,
                ),
                SignatureBlock(
                    role="RN",
                    typed_name=rn_signature.typed_name if rn_signature else "",
                    signature_image=rn_signature.signature_image if rn_signature else None,
                ),
            ],
        )
        logger.info(f"Built delegation packet for {delegation.id}")
        return packet

    @staticmethod
    def build_assessment_report(resident: Resident, assessment: Assessment) -> AssessmentReport:
        return AssessmentReport(
            resident_name=resident.name,
            assessment_date=assessment.assessment_date.isoformat(),
            type=assessment.type.value,
            status="Stable" if assessment.stable else "Unstable",
            narrative=assessment.notes,
        )

    @staticmethod
    def build_transcript(med_tech: MedTech, community: Optional[Community]) -> TrainingTranscriptReport:
        """Transcript rows newest first; an empty transcript prints a single 'No records.' row"""
        records = sorted(med_tech.training_transcript, key=lambda t: t.training_date, reverse=True)
        rows: List[List[str]] = [
            [format_date(t.training_date), t.topic, t.notes] for t in records
        ]
        return TrainingTranscriptReport(
            med_tech_name=med_tech.name,
            community_name=community.name if community else "",
            rows=rows or [[NO_RECORDS]],
        )


# =============================================================================
# Markdown Rendering
# =============================================================================

def render_packet_markdown(packet: DelegationPacket) -> str:
    """Deterministic text rendering of a packet"""
    lines = [f"# {packet.title}", ""]
    lines.append(f"**Resident:** {packet.resident_name} (DOB {packet.resident_dob})")
    lines.append(f"**Regimen:** {packet.regimen}")
    lines.append(f"**Med-Tech:** {packet.med_tech_name}")
    lines.append(f"**Task:** {packet.task_label}")
    lines.append(f"**Auth Ends:** {packet.auth_ends}")
    lines.append("")

    lines.append("## OBN Checklist")
    lines.append("")
    lines.append(" | ".join(f"{label}: {value}" for label, value in packet.checklist.items()))
    lines.append("")

    lines.append("## Procedure")
    lines.append("")
    lines.append(f"**{packet.procedure_title}**")
    lines.extend(f"- {step}" for step in packet.procedure_steps)
    if packet.watch_for:
        lines.append("")
        lines.append("**Watch for:**")
        lines.extend(f"- {item}" for item in packet.watch_for)
    if packet.action_if_occurs:
        lines.append("")
        lines.append("**Action if occurs:**")
        lines.extend(f"- {item}" for item in packet.action_if_occurs)
    lines.append("")

    lines.append("## Competency")
    lines.append("")
    lines.append("**Methods:** " + ", ".join(f"{label}: {value}" for label, value in packet.competency.items()))
    lines.append("")

    lines.append("## Justification")
    lines.append("")
    for clause in packet.justification:
        lines.append(f"**{clause.question}**")
        lines.append(clause.answer)
        lines.append("")
    lines.append("**Delegation Statement:**")
    lines.append(packet.statement)
    lines.append("")

    lines.append("## Signatures")
    lines.append("")
    for block in packet.signatures:
        marker = "[signature on file]" if block.signature_image else "____________________"
        lines.append(f"{marker} **{block.role}:** {block.typed_name}")

    return "\n".join(lines)


def render_assessment_markdown(report: AssessmentReport) -> str:
    return "\n".join([
        f"# {report.title}",
        "",
        f"**Resident:** {report.resident_name}",
        f"**Date:** {report.assessment_date}",
        f"**Type:** {report.type}",
        f"**Status:** {report.status}",
        "",
        "### Narrative",
        "",
        report.narrative,
    ])


def render_transcript_markdown(report: TrainingTranscriptReport) -> str:
    lines = [
        f"# {report.title}",
        "",
        f"**Med-Tech:** {report.med_tech_name}",
        f"**Community:** {report.community_name}",
        "",
        "| " + " | ".join(report.columns) + " |",
        "|" + "---|" * len(report.columns),
    ]
    for row in report.rows:
        cells = row + [""] * (len(report.columns) - len(row))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


# =============================================================================
# Public API
# =============================================================================

def build_delegation_packet(registry: StoreRegistry, delegation_id: str) -> DelegationPacket:
    """
    Look up everything a delegation's packet needs and build it

    Raises:
        NotFoundError: Unknown delegation
    """
    delegation = registry.delegations.get(delegation_id)
    resident = registry.residents.find(delegation.resident_id)
    community = registry.community_for_resident(resident) if resident else None
    return DocumentBuilder.build_packet(
        community=community,
        delegation=delegation,
        resident=resident,
        med_tech=registry.med_techs.find(delegation.med_tech_id),
        task=catalog.find_task(delegation.task_id),
        packet_template=catalog.get_packet_template(delegation.task_id),
        rn_signature=delegation.signatures.rn,
        mt_signature=delegation.signatures.mt,
    )


def build_assessment_report(registry: StoreRegistry, resident_id: str, index: int = 0) -> AssessmentReport:
    """
    Report for one of a resident's assessments (0 = most recent)

    Raises:
        NotFoundError: Unknown resident, or no assessment at that position
    """
    resident = registry.residents.get(resident_id)
    if not 0 <= index < len(resident.assessments):
        raise NotFoundError("Assessment", f"{resident_id}[{index}]")
    return DocumentBuilder.build_assessment_report(resident, resident.assessments[index])


def build_training_transcript(registry: StoreRegistry, med_tech_id: str) -> TrainingTranscriptReport:
    """Training transcript for a med-tech"""
    med_tech = registry.med_techs.get(med_tech_id)
    return DocumentBuilder.build_transcript(med_tech, registry.communities.find(med_tech.community_id))
