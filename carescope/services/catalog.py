"""
CareScope Task Catalog
Static reference data: delegable tasks, procedure packets and training content
"""

import logging
from typing import Dict, List, Optional

from carescope.schemas import DelegationTask, TaskPacketTemplate
from carescope.errors import NotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# Delegable Tasks
# =============================================================================

DELEGATION_TASKS: List[DelegationTask] = [
    DelegationTask(
        id="insulin-pen",
        label="Insulin Administration (Pen)",
        form_template="RN Delegation Insulin Pen.docx",
    ),
    DelegationTask(
        id="insulin-vial",
        label="Insulin Administration (Vial/Syringe)",
        form_template="RN Delegation Insulin Vial.docx",
    ),
    DelegationTask(
        id="trulicity",
        label="Trulicity Administration",
        form_template="RN Delegation Instructions Trulicity.docx",
    ),
    DelegationTask(
        id="libre-sensor",
        label="Libre Sensor Removal/Application",
        form_template="RN Delegation Instructions Libre Sensor.docx",
    ),
    DelegationTask(
        id="glucose-monitoring",
        label="Blood Glucose Measurement",
        form_template="RN Delegation Glucose Monitoring.docx",
    ),
    DelegationTask(
        id="glp-1",
        label="GLP-1 Agonists Administration",
        form_template="RN Delegation of GLP-1.docx",
    ),
]


# =============================================================================
# Procedure Packets
# =============================================================================

TASK_PACKET_TEMPLATES: Dict[str, TaskPacketTemplate] = {
    "insulin-pen": TaskPacketTemplate(
        title="Insulin Administration (Pen)",
        steps=[
            "Verify resident identity, medication, dose, timing, and parameters.",
            "Perform/confirm blood glucose per ordered parameters (if applicable).",
            "Prepare pen/needle per policy; choose site; cleanse skin.",
            "Administer subcutaneous injection; dispose sharps per protocol.",
            "Document administration and any resident response/concerns.",
        ],
        watch_for=[
            "Hypoglycemia symptoms",
            "Injection site bleeding/bruising",
            "Unusual resident change",
        ],
        action_if_occurs=[
            "Follow hypoglycemia protocol; notify RN; call 911 if unresponsive",
            "Notify RN; apply pressure if bleeding",
        ],
    ),
    "insulin-vial": TaskPacketTemplate(
        title="Insulin Administration (Vial/Syringe)",
        steps=[
            "Verify resident identity, medication, dose, timing, and parameters.",
            "Perform/confirm blood glucose per ordered parameters (if applicable).",
            "Cleanse vial top; inject air; draw up correct dose; verify no bubbles.",
            "Prepare site; cleanse skin; administer subcutaneous injection.",
            "Dispose sharps immediately; document administration.",
        ],
        watch_for=[
            "Hypoglycemia symptoms",
            "Injection site bleeding/bruising",
            "Incorrect dose measurement",
        ],
        action_if_occurs=[
            "Follow hypoglycemia protocol; notify RN; call 911 if unresponsive",
        ],
    ),
    "glucose-monitoring": TaskPacketTemplate(
        title="Blood Glucose Measurement",
        steps=[
            "Verify resident identity and order parameters.",
            "Perform fingerstick per device policy and infection control.",
            "Record reading and act per parameter thresholds.",
            "Notify RN/MD as ordered; document notifications.",
        ],
        watch_for=["Low BG symptoms", "High BG symptoms", "Bleeding at puncture site"],
        action_if_occurs=[
            "Follow hypo/hyperglycemia protocol; notify RN; call 911 if needed",
        ],
    ),
    "libre-sensor": TaskPacketTemplate(
        title="Libre Sensor Removal/Application",
        steps=[
            "Verify correct resident and device.",
            "Apply/remove per manufacturer + RN instruction.",
            "Ensure adhesion; monitor for bleeding/skin irritation.",
            "Document device application/removal and any issues.",
        ],
        watch_for=[
            "Bleeding",
            "Infection signs at site",
            "Device not adhering/incorrect readings",
        ],
        action_if_occurs=["Notify RN immediately; obtain manual BG if needed"],
    ),
    "trulicity": TaskPacketTemplate(
        title="Trulicity Administration",
        steps=[
            "Verify resident identity and order.",
            "Prepare injection; administer per policy.",
            "Monitor for injection site bleeding/bruising and common side effects.",
            "Document administration and resident response.",
        ],
        watch_for=["Bleeding/bruising", "GI side effects", "Hypoglycemia (if applicable)"],
        action_if_occurs=[
            "Notify RN; follow protocol; call 911 if severe/unresponsive",
        ],
    ),
    "glp-1": TaskPacketTemplate(
        title="GLP-1 Agonists Administration",
        steps=[
            "Verify order and resident",
            "Prepare/administration per product",
            "Document and monitor response",
        ],
        watch_for=["GI side effects", "Injection site reaction"],
        action_if_occurs=["Notify RN; follow policy"],
    ),
}


# =============================================================================
# Med-Tech Training Content
# =============================================================================

DIABETIC_TRAINING_CONTENT = """Medication Technician – Diabetic Training

What is diabetes?
Diabetes is the condition in which the body does not properly process food for use as energy. The pancreas makes insulin to help glucose get into cells. In diabetes, the body doesn't make enough insulin or can't use it well, causing sugar buildup in blood.

What is Hypoglycemia? Not enough sugar in the blood. Blood sugar below 70.
Symptoms: Cold clammy skin, excessive perspiration, headache, confusion, slurred speech, weakness, drowsiness, nervousness, fatigue, trembling, hunger, impaired vision, rapid heart rate.

3. Rule of Fifteens (Low Blood Sugar < 70)
- If unresponsive/unable to swallow: Call 911.
- If responsive:
  1. Eat/drink 15g Carbohydrates (e.g., 4-6oz orange juice, 4-6oz regular soda, 2-4 glucose tabs).
  2. Re-test in 15 min.
  3. If still < 70, repeat 15g carbs and re-test in 15 min.
  4. If still < 70, notify RN/PCP immediately.
  5. If > 70, follow with protein snack (milk, cheese, peanut butter).

What is Hyperglycemia? Too much sugar in the blood. Blood sugar above 200.
Symptoms: Increased thirst, increased urination, weakness, hunger, nausea, blurry vision, drowsiness, sweet/alcohol smell on breath.
Action: Follow hyperglycemia protocol.

Injection Safety (Insulin Pen)
- Triple check MAR and Pen label.
- Roll cloudy insulin (never shake).
- Prime needle with 2 units (point up).
- Hold pen in skin for 10 seconds after injection.
- Dispose of needle in sharps container immediately. Never recap if possible."""


_TASKS_BY_ID: Dict[str, DelegationTask] = {task.id: task for task in DELEGATION_TASKS}


# =============================================================================
# Public API
# =============================================================================

def list_tasks() -> List[DelegationTask]:
    return list(DELEGATION_TASKS)


def find_task(task_id: str) -> Optional[DelegationTask]:
    return _TASKS_BY_ID.get(task_id)


def get_task(task_id: str) -> DelegationTask:
    """
    Look up a catalog task

    Raises:
        NotFoundError: Unknown task id
    """
    task = _TASKS_BY_ID.get(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def get_packet_template(task_id: str) -> Optional[TaskPacketTemplate]:
    """Procedure packet for a task, or None when the task has none"""
    return TASK_PACKET_TEMPLATES.get(task_id)
