"""
CareScope Justification Composer
Renders the regulatory delegation narrative from structured fields
"""

import logging
from typing import List, Optional, Tuple

from carescope.schemas import JustificationFields, MedTech

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"
SIGNER_PLACEHOLDER = "__________"


# =============================================================================
# Narrative Prompts
# =============================================================================

class JustificationPrompts:
    """Printed questions, in document order"""

    RN_WORKED_WITH_EMPLOYEE = "Length of time RN has worked with employee being delegated:"
    TRAINING_METHOD = (
        "Document method of training/delegating task of administering insulin, including rationale:"
    )
    INSULIN_EXPERIENCE = (
        "Length of time during career employee has given insulin; "
        "include details on within your community and total within career."
    )
    WITHIN_COMMUNITY = "• Within this community:"
    WITHIN_CAREER = "• Total within career:"
    RESIDENT_KNOWLEDGE = (
        "Length of time the employee has worked directly with the Resident being delegated "
        "and knowledge level of individualized signs and symptoms of hyper/hypoglycemia of this resident:"
    )
    WILLINGNESS = "Describe the willingness of the Unlicensed Professional to conduct the delegated task:"

    # Field -> label used in "Justification required: ..." messages
    REQUIRED_LABELS: List[Tuple[str, str]] = [
        ("rn_worked_with_employee_length", "Length of time RN has worked with employee"),
        ("training_method_and_rationale", "Method of training/delegating + rationale"),
        ("insulin_experience_community", "Insulin experience within your community"),
        ("insulin_experience_career", "Insulin experience total within career"),
        ("resident_work_and_knowledge", "Worked with resident + individualized signs/symptoms knowledge"),
        ("willingness_description", "Willingness of UAP to conduct delegated task"),
    ]


def stable_clause(stable: bool) -> str:
    return "stable and predictable" if stable else "NOT confirmed as stable and predictable"


def delegation_statement(signer_name: Optional[str], auth_days: Optional[int], stable: bool) -> str:
    """Closing attestation sentence of the narrative"""
    signer = signer_name or SIGNER_PLACEHOLDER
    days = "" if auth_days is None else auth_days
    return (
        f"I, {signer}, RN am delegating this employee for the next ({days}) days "
        f"based on the above criteria and documented assessment in the medical record "
        f"of the resident being {stable_clause(stable)}."
    )


# =============================================================================
# Composer
# =============================================================================

class JustificationComposer:
    """Pure functions over justification fields"""

    @staticmethod
    def compose(
        signer_name: Optional[str],
        auth_days: Optional[int],
        stable: bool,
        fields: Optional[JustificationFields]
    ) -> str:
        """
        Render the six clauses plus the attestation sentence

        Args:
            signer_name: RN of record; blank renders a signature line
            auth_days: Authorized day count embedded in the attestation
            stable: Whether the resident is attested stable and predictable
            fields: Structured answers; blank answers render as a placeholder

        Returns:
            Newline-joined narrative text
        """
        f = fields or JustificationFields()
        p = JustificationPrompts
        lines = [
            f"{p.RN_WORKED_WITH_EMPLOYEE} {f.rn_worked_with_employee_length or PLACEHOLDER}",
            f"{p.TRAINING_METHOD} {f.training_method_and_rationale or PLACEHOLDER}",
            p.INSULIN_EXPERIENCE,
            f"{p.WITHIN_COMMUNITY} {f.insulin_experience_community or PLACEHOLDER}",
            f"{p.WITHIN_CAREER} {f.insulin_experience_career or PLACEHOLDER}",
            f"{p.RESIDENT_KNOWLEDGE} {f.resident_work_and_knowledge or PLACEHOLDER}",
            f"{p.WILLINGNESS} {f.willingness_description or PLACEHOLDER}",
            delegation_statement(signer_name, auth_days, stable),
        ]
        return "\n".join(lines)

    @staticmethod
    def missing_fields(fields: Optional[JustificationFields]) -> List[str]:
        """One 'Justification required' message per field that is blank after trimming"""
        f = fields or JustificationFields()
        return [
            f"Justification required: {label}"
            for name, label in JustificationPrompts.REQUIRED_LABELS
            if not getattr(f, name).strip()
        ]

    @staticmethod
    def willingness_fallback(med_tech: Optional[MedTech]) -> str:
        """Profile willingness narrative, else Willing/Not willing from the flag"""
        if med_tech is None:
            return ""
        if med_tech.delegation_profile.willingness_description:
            return med_tech.delegation_profile.willingness_description
        if med_tech.willingness is True:
            return "Willing"
        if med_tech.willingness is False:
            return "Not willing"
        return ""

    @staticmethod
    def prefill_from_profile(
        fields: Optional[JustificationFields],
        med_tech: Optional[MedTech]
    ) -> JustificationFields:
        """
        Fill blank fields from the med-tech's delegation profile

        Caller-entered text is never overwritten; the training-method and
        resident-knowledge fields have no profile source.
        """
        current = fields or JustificationFields()
        if med_tech is None:
            return current

        profile = med_tech.delegation_profile
        fallbacks = {
            "rn_worked_with_employee_length": profile.rn_worked_with_employee_length,
            "insulin_experience_community": profile.insulin_experience_community,
            "insulin_experience_career": profile.insulin_experience_career,
            "willingness_description": JustificationComposer.willingness_fallback(med_tech),
        }
        updates = {
            name: value
            for name, value in fallbacks.items()
            if value and not getattr(current, name)
        }
        if updates:
            logger.debug(f"Prefilled {sorted(updates)} from med-tech {med_tech.id} profile")
        return current.model_copy(update=updates)


# =============================================================================
# Public API
# =============================================================================

def compose_justification(
    signer_name: Optional[str],
    auth_days: Optional[int],
    stable: bool,
    fields: Optional[JustificationFields]
) -> str:
    """Render the delegation justification narrative"""
    return JustificationComposer.compose(signer_name, auth_days, stable, fields)
