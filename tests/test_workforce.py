"""
Unit tests for registry and workforce operations
"""

import pytest
from datetime import date

from carescope.errors import DelegationValidationError, NotFoundError
from carescope.schemas import (
    AssessmentStatus, CommunityCreate, CommunityUpdate, ContactInfo,
    JustificationFields, MedTechCreate, MedTechSupervisionRequest,
    ResidentCreate, ResidentUpdate, TrainingLogRequest, TrainingMethods
)
from carescope.modules.registry import RegistryService
from carescope.modules.workforce import WorkforceService, compose_training_notes


class TestRegistry:
    """Test community, resident and med-tech records"""

    @pytest.fixture
    def service(self, registry, clock):
        return RegistryService(registry, clock)

    def test_add_community(self, service, registry):
        community = service.add_community(CommunityCreate(name="Woodside Assisted Living"))
        assert community.id.startswith("cm-")
        assert community.rn.name == ""
        assert registry.communities.get(community.id).name == "Woodside Assisted Living"

    def test_update_community_rn(self, service):
        updated = service.update_community("cm-01", CommunityUpdate(rn=ContactInfo(name="Nadia Brooks")))
        assert updated.rn.name == "Nadia Brooks"
        assert updated.name == "The Cottages Memory Care"

    def test_delete_community_in_use(self, service):
        with pytest.raises(DelegationValidationError):
            service.delete_community("cm-01")

    def test_delete_empty_community(self, service, registry):
        community = service.add_community(CommunityCreate(name="Evergreen Memory Care"))
        service.delete_community(community.id)
        assert community.id not in registry.communities

    def test_add_resident_starts_pending(self, service):
        resident = service.add_resident(ResidentCreate(community_id="cm-01", name="Jacen Johns", unit="305"))
        assert resident.assessment_status == AssessmentStatus.PENDING
        assert resident.assessments == []

    def test_resident_name_required(self, service):
        with pytest.raises(DelegationValidationError) as exc_info:
            service.add_resident(ResidentCreate(community_id="cm-01", name="  "))
        assert exc_info.value.errors == ["Resident name is required"]

    def test_resident_unknown_community(self, service):
        with pytest.raises(NotFoundError):
            service.add_resident(ResidentCreate(community_id="cm-missing", name="Jacen Johns"))

    def test_update_resident_keeps_history(self, service):
        updated = service.update_resident("res-001", ResidentUpdate(unit="102"))
        assert updated.unit == "102"
        assert len(updated.assessments) == 1
        assert updated.assessment_status == AssessmentStatus.STABLE

    def test_add_med_tech(self, service):
        med_tech = service.add_med_tech(MedTechCreate(community_id="cm-01", name="Alicia Perez", willingness=False))
        assert med_tech.hire_date == date(2024, 1, 1)
        assert med_tech.training_transcript == []


class TestTraining:
    """Test training logs"""

    @pytest.fixture
    def service(self, registry, clock):
        return WorkforceService(registry.med_techs, clock)

    def test_notes_with_methods(self):
        methods = TrainingMethods(carescope_course=True, discussion=True, other=True, other_narrative="Video")
        assert compose_training_notes(methods, "Passed quiz") == (
            "Methods: CareScope Diabetic Course 4 Hours, Discussion/Questions, Other: Video\nPassed quiz"
        )

    def test_notes_without_methods(self):
        assert compose_training_notes(TrainingMethods(), "Passed quiz") == "Passed quiz"

    def test_log_training_for_several(self, service, registry, med_tech):
        registry.med_techs.save(med_tech.model_copy(update={"id": "mt-002", "name": "Alicia Perez"}))
        updated = service.log_training(TrainingLogRequest(
            med_tech_ids=["mt-001", "mt-002"], topic="Hypoglycemia review", methods=TrainingMethods(lecture=True)
        ))

        assert len(updated) == 2
        for mt in updated:
            assert mt.training == "Hypoglycemia review"
            assert mt.training_transcript[0].topic == "Hypoglycemia review"
            assert mt.training_transcript[0].training_date == date(2024, 1, 1)
            assert mt.training_transcript[0].notes == "Methods: Lecture\n"

    def test_prepends(self, service):
        service.log_training(TrainingLogRequest(med_tech_ids=["mt-001"], topic="First", training_date=date(2023, 6, 1)))
        updated = service.log_training(TrainingLogRequest(med_tech_ids=["mt-001"], topic="Second"))
        assert [t.topic for t in updated[0].training_transcript] == ["Second", "First"]

    def test_validation(self, service):
        with pytest.raises(DelegationValidationError) as exc_info:
            service.log_training(TrainingLogRequest(topic=" "))
        assert exc_info.value.errors == ["Select at least one Med-Tech", "Training topic is required"]

    def test_supervision_visit(self, service):
        updated = service.record_supervision("mt-001", MedTechSupervisionRequest(supervision_date=date(2023, 12, 15)))
        assert updated.last_supervision == date(2023, 12, 15)

    def test_prefill(self, service):
        fields = service.prefill_justification("mt-001", JustificationFields(insulin_experience_career="Typed"))
        assert fields.insulin_experience_career == "Typed"
        assert fields.insulin_experience_community == "5 years within this community."


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
