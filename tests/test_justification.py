"""
Unit tests for the justification composer
"""

import pytest

from carescope.schemas import JustificationFields, MedTech, DelegationProfile
from carescope.modules.justification import (
    JustificationComposer, compose_justification, delegation_statement
)


class TestCompose:
    """Test narrative rendering"""

    def test_full_narrative(self, justification):
        """Test all six clauses and the attestation in order"""
        text = JustificationComposer.compose("Rita Okafor", 90, True, justification)
        lines = text.split("\n")

        assert len(lines) == 8
        assert lines[0] == "Length of time RN has worked with employee being delegated: 3 years"
        assert lines[1].startswith("Document method of training/delegating task of administering insulin")
        assert lines[2].startswith("Length of time during career employee has given insulin;")
        assert lines[3] == "• Within this community: 2 years"
        assert lines[4] == "• Total within career: 6 years"
        assert lines[5].endswith("of this resident: 1 year; recognizes resident's hypoglycemia signs")
        assert lines[6] == (
            "Describe the willingness of the Unlicensed Professional to conduct the delegated task: Willing"
        )
        assert lines[7] == (
            "I, Rita Okafor, RN am delegating this employee for the next (90) days based on the above "
            "criteria and documented assessment in the medical record of the resident being stable and predictable."
        )

    def test_missing_fields_render_placeholder(self):
        """Test blank answers are shown, not dropped"""
        text = JustificationComposer.compose("Rita Okafor", 30, True, JustificationFields())

        assert text.count(": —") == 6
        assert len(text.split("\n")) == 8

    def test_missing_signer_renders_signature_line(self, justification):
        text = compose_justification("", 30, True, justification)
        assert "I, __________, RN" in text

    def test_unstable_clause(self, justification):
        text = JustificationComposer.compose("Rita Okafor", 30, False, justification)
        assert text.endswith("NOT confirmed as stable and predictable.")

    def test_deterministic(self, justification):
        """Test identical inputs give identical text"""
        first = JustificationComposer.compose("Rita Okafor", 45, True, justification)
        second = JustificationComposer.compose("Rita Okafor", 45, True, justification.model_copy())
        assert first == second

    def test_changing_days_changes_only_statement_digits(self, justification):
        """Test only the day count in the last line differs"""
        a = JustificationComposer.compose("Rita Okafor", 90, True, justification).split("\n")
        b = JustificationComposer.compose("Rita Okafor", 120, True, justification).split("\n")

        assert a[:-1] == b[:-1]
        assert a[-1].replace("(90)", "(120)") == b[-1]

    def test_statement_without_days(self):
        assert "for the next () days" in delegation_statement("Rita Okafor", None, True)


class TestMissingFields:
    """Test required-field messages"""

    def test_all_missing(self):
        errors = JustificationComposer.missing_fields(JustificationFields())
        assert errors == [
            "Justification required: Length of time RN has worked with employee",
            "Justification required: Method of training/delegating + rationale",
            "Justification required: Insulin experience within your community",
            "Justification required: Insulin experience total within career",
            "Justification required: Worked with resident + individualized signs/symptoms knowledge",
            "Justification required: Willingness of UAP to conduct delegated task",
        ]

    def test_whitespace_counts_as_missing(self, justification):
        fields = justification.model_copy(update={"willingness_description": "   "})
        assert JustificationComposer.missing_fields(fields) == [
            "Justification required: Willingness of UAP to conduct delegated task"
        ]

    def test_complete(self, justification):
        assert JustificationComposer.missing_fields(justification) == []


class TestPrefill:
    """Test filling blanks from the med-tech profile"""

    def test_fills_only_blank_fields(self, med_tech):
        fields = JustificationFields(rn_worked_with_employee_length="Entered by RN")
        result = JustificationComposer.prefill_from_profile(fields, med_tech)

        assert result.rn_worked_with_employee_length == "Entered by RN"
        assert result.insulin_experience_community == "5 years within this community."
        assert result.insulin_experience_career == "5+ years total."
        assert result.willingness_description == "Willing and routinely performs task."
        assert result.training_method_and_rationale == ""
        assert result.resident_work_and_knowledge == ""

    def test_input_not_modified(self, med_tech):
        fields = JustificationFields()
        JustificationComposer.prefill_from_profile(fields, med_tech)
        assert fields == JustificationFields()

    @pytest.mark.parametrize("willing,expected", [(True, "Willing"), (False, "Not willing"), (None, "")])
    def test_willingness_flag_fallback(self, willing, expected):
        mt = MedTech(id="mt-x", community_id="cm-01", name="Alicia Perez", willingness=willing,
                     delegation_profile=DelegationProfile())
        result = JustificationComposer.prefill_from_profile(None, mt)
        assert result.willingness_description == expected

    def test_no_med_tech(self, justification):
        assert JustificationComposer.prefill_from_profile(justification, None) == justification
