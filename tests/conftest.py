"""
Shared fixtures: a fixed clock at 2024-01-01 and one seeded community
"""

import pytest
from datetime import date, datetime

from carescope.schemas import (
    Assessment, AssessmentStatus, AssessmentType, Community, CompetencyMethods,
    ContactInfo, CreateDelegationRequest, Delegation, DelegationChecklist,
    DelegationProfile, JustificationFields, MedTech, Resident
)
from carescope.modules.lifecycle import DelegationLifecycleEngine
from carescope.services.clock import FixedClock
from carescope.services.stores import (
    CommunityStore, DelegationStore, MedTechStore, ResidentStore, StoreRegistry
)

TODAY = date(2024, 1, 1)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 1, 9, 30))


@pytest.fixture
def community():
    return Community(
        id="cm-01",
        name="The Cottages Memory Care",
        rn=ContactInfo(name="Rita Okafor", email="rita@example.org", phone="555-0100"),
    )


@pytest.fixture
def resident():
    return Resident(
        id="res-001",
        community_id="cm-01",
        name="Donald Duck",
        dob=date(1934, 6, 9),
        unit="101",
        diagnosis="Type 2 Diabetes, brittle insulin-dependent",
        regimen="Novolog FlexPen sliding scale 3x daily after meals, Lantus 20 units AM",
        assessment_status=AssessmentStatus.STABLE,
        last_assessment_date=date(2023, 11, 9),
        assessments=[
            Assessment(
                assessment_date=date(2023, 11, 9),
                type=AssessmentType.QUARTERLY,
                stable=True,
                notes="Stable and predictable.",
            )
        ],
    )


@pytest.fixture
def med_tech():
    return MedTech(
        id="mt-001",
        community_id="cm-01",
        name="Maria Lopez",
        hire_date=date(2019, 1, 10),
        experience="5 years insulin",
        willingness=True,
        delegation_profile=DelegationProfile(
            rn_worked_with_employee_length="RN has worked with employee for 5 years.",
            insulin_experience_community="5 years within this community.",
            insulin_experience_career="5+ years total.",
            willingness_description="Willing and routinely performs task.",
        ),
    )


@pytest.fixture
def registry(community, resident, med_tech):
    return StoreRegistry(
        communities=CommunityStore([community]),
        residents=ResidentStore([resident]),
        med_techs=MedTechStore([med_tech]),
        delegations=DelegationStore(),
    )


@pytest.fixture
def engine(registry, clock):
    return DelegationLifecycleEngine(registry, clock=clock)


@pytest.fixture
def justification():
    return JustificationFields(
        rn_worked_with_employee_length="3 years",
        training_method_and_rationale="Demonstration and return demonstration on insulin pen",
        insulin_experience_community="2 years",
        insulin_experience_career="6 years",
        resident_work_and_knowledge="1 year; recognizes resident's hypoglycemia signs",
        willingness_description="Willing",
    )


@pytest.fixture
def create_request(justification):
    return CreateDelegationRequest(
        resident_id="res-001",
        med_tech_id="mt-001",
        task_ids=["insulin-pen"],
        auth_days=90,
        checklist=DelegationChecklist(
            stable_condition=True,
            safe_environment=True,
            uap_skills=True,
            uap_willing=True,
            rn_available=True,
            written_instructions=True,
            non_transferable=True,
        ),
        competency_methods=CompetencyMethods(lecture=True, demonstration=True, return_demonstration=True),
        justification=justification,
    )


@pytest.fixture
def make_delegation():
    """Factory for stored delegations with explicit dates"""
    counter = {"n": 0}

    def _make(end_date=date(2024, 3, 31), start_date=date(2024, 1, 1), **overrides):
        counter["n"] += 1
        values = dict(
            id=f"dlg-{counter['n']:03d}",
            resident_id="res-001",
            med_tech_id="mt-001",
            task_id="insulin-pen",
            start_date=start_date,
            end_date=end_date,
            initial_start_date=start_date,
            auth_days=max(1, (end_date - start_date).days),
            supervision_due_date=date(2024, 3, 1),
            created_at=datetime(2024, 1, 1, 9, 30),
        )
        values.update(overrides)
        return Delegation(**values)

    return _make
