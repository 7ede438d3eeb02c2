"""
CareScope Workforce
Med-tech training transcripts, supervision visits and justification prefill
"""

import logging
from typing import List, Optional

from carescope.errors import DelegationValidationError
from carescope.schemas import (
    JustificationFields, MedTech, MedTechSupervisionRequest, TrainingLogRequest,
    TrainingMethods, TrainingRecord
)
from carescope.modules.justification import JustificationComposer
from carescope.services.clock import Clock, get_clock
from carescope.services.stores import MedTechStore

logger = logging.getLogger(__name__)

TRAINING_METHOD_LABELS = [
    ("carescope_course", "CareScope Diabetic Course 4 Hours"),
    ("lecture", "Lecture"),
    ("discussion", "Discussion/Questions"),
    ("demonstration", "Demonstration"),
    ("packet_reviewed", "Packet Reviewed"),
]


def training_method_labels(methods: TrainingMethods) -> List[str]:
    labels = [label for name, label in TRAINING_METHOD_LABELS if getattr(methods, name)]
    if methods.other:
        labels.append(f"Other: {methods.other_narrative}")
    return labels


def compose_training_notes(methods: TrainingMethods, notes: str) -> str:
    """'Methods: a, b' line followed by free-text notes; no prefix when no method was used"""
    labels = training_method_labels(methods)
    prefix = f"Methods: {', '.join(labels)}\n" if labels else ""
    return f"{prefix}{notes}"


class WorkforceService:
    """Operations on med-tech records outside any single delegation"""

    def __init__(self, med_techs: MedTechStore, clock: Optional[Clock] = None):
        self.med_techs = med_techs
        self.clock = clock or get_clock()

    def log_training(self, request: TrainingLogRequest) -> List[MedTech]:
        """
        Prepend one training record to each selected med-tech's transcript

        Args:
            request: Med-tech ids, date (defaults to today), topic, notes, methods

        Returns:
            Updated med-techs, in request order

        Raises:
            DelegationValidationError: No med-tech selected, missing topic, or unknown ids
        """
        errors = []
        if not request.med_tech_ids:
            errors.append("Select at least one Med-Tech")
        if not request.topic.strip():
            errors.append("Training topic is required")
        for med_tech_id in request.med_tech_ids:
            if med_tech_id not in self.med_techs:
                errors.append(f"Med-Tech not found: {med_tech_id}")
        if errors:
            logger.warning(f"Training log rejected: {errors}")
            raise DelegationValidationError(errors)

        record = TrainingRecord(
            training_date=request.training_date or self.clock.now().date(),
            topic=request.topic.strip(),
            notes=compose_training_notes(request.methods, request.notes),
        )

        updated = []
        for med_tech_id in dict.fromkeys(request.med_tech_ids):
            med_tech = self.med_techs.get(med_tech_id)
            changed = med_tech.model_copy(update={
                "training_transcript": [record, *med_tech.training_transcript],
                "training": record.topic,
            })
            self.med_techs.save(changed)
            updated.append(changed)

        logger.info(f"Logged training '{record.topic}' for {len(updated)} med-tech(s)")
        return updated

    def record_supervision(self, med_tech_id: str, request: MedTechSupervisionRequest) -> MedTech:
        """Record an RN supervision visit on the med-tech"""
        med_tech = self.med_techs.get(med_tech_id)
        visit_date = request.supervision_date or self.clock.now().date()
        updated = med_tech.model_copy(update={"last_supervision": visit_date})
        self.med_techs.save(updated)
        logger.info(f"Recorded supervision for med-tech {med_tech_id} on {visit_date.isoformat()}")
        return updated

    def prefill_justification(self, med_tech_id: str, fields: Optional[JustificationFields] = None) -> JustificationFields:
        """Justification fields with blanks filled from the med-tech's profile"""
        return JustificationComposer.prefill_from_profile(fields, self.med_techs.get(med_tech_id))
