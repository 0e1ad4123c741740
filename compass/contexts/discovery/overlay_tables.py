"""
Hand-authored overlay content for the discovery augmenter.

Lookup tables keyed by line of business, project type, and "{lob}-{project_type}"
combination. Keys missing from a table contribute nothing to the overlay.
"""

from typing import Dict, List, Tuple

TECHNOLOGY_CATEGORY = "Technology & Implementation"
SPECIALIZED_CATEGORY = "Specialized Use Cases"

LOB_CATEGORIES: Dict[str, str] = {
    "finance": "Finance & Accounting Focus",
    "hr": "Human Resources Focus",
    "it": "IT Operations Focus",
    "operations": "Business Operations Focus",
    "customer-service": "Customer Experience Focus",
    "procurement": "Procurement & Supply Chain Focus",
    "legal": "Legal & Compliance Focus",
    "compliance": "Risk & Compliance Focus",
}

LOB_QUESTIONS: Dict[str, List[str]] = {
    "finance": [
        "What financial processes consume the most manual effort each month?",
        "How do you currently handle month-end closing and reconciliation?",
        "What regulatory reporting requirements create bottlenecks?",
    ],
    "hr": [
        "What HR processes require the most manual data entry?",
        "How do you currently handle employee onboarding and offboarding?",
        "What compliance reporting do you need to maintain for HR?",
    ],
    "it": [
        "What IT service requests consume the most support time?",
        "How do you currently handle system monitoring and incident response?",
        "What manual processes exist in your infrastructure management?",
    ],
    "operations": [
        "What operational processes have the highest error rates?",
        "How do you currently handle order processing and fulfillment?",
        "What manual quality control processes could be improved?",
    ],
    "customer-service": [
        "What customer inquiries require the most manual research?",
        "How do you currently handle case routing and escalation?",
        "What processes slow down your first-call resolution rates?",
    ],
    "procurement": [
        "What procurement processes involve the most manual approvals?",
        "How do you currently handle vendor onboarding and management?",
        "What spend analysis and reporting is done manually?",
    ],
    "legal": [
        "What legal document processes require extensive manual review?",
        "How do you currently handle contract management and tracking?",
        "What compliance monitoring is done manually?",
    ],
    "compliance": [
        "What compliance processes require the most manual oversight?",
        "How do you currently handle risk assessment and monitoring?",
        "What regulatory reporting involves manual data collection?",
    ],
}

PROJECT_TYPE_QUESTIONS: Dict[str, List[str]] = {
    "rpa": [
        "What repetitive, rule-based tasks take up the most time?",
        "Which processes have clear decision trees and minimal exceptions?",
        "What systems need to integrate without APIs?",
    ],
    "idp": [
        "What types of documents do you process in high volumes?",
        "How much time is spent manually extracting data from documents?",
        "What document-based processes have quality control issues?",
    ],
    "agentic": [
        "What processes require complex decision-making and reasoning?",
        "Where do you need autonomous systems to handle exceptions?",
        "What workflows would benefit from self-learning capabilities?",
    ],
    "maestro": [
        "What end-to-end processes span multiple departments and systems?",
        "Where do you need orchestration of both human and digital workers?",
        "What complex workflows require dynamic routing and escalation?",
    ],
}

COMBINED_QUESTIONS: Dict[str, List[str]] = {
    "finance-rpa": [
        "How do you currently handle invoice processing from receipt to payment?",
        "What financial reconciliation processes could benefit from automation?",
    ],
    "finance-idp": [
        "What types of financial documents require manual data extraction?",
        "How do you process expense reports and receipts currently?",
    ],
    "hr-rpa": [
        "What employee onboarding steps are repetitive across all hires?",
        "How do you handle benefits enrollment and changes?",
    ],
    "hr-idp": [
        "What HR documents require manual review and data entry?",
        "How do you process resumes and job applications currently?",
    ],
    "it-agentic": [
        "What IT incidents require intelligent analysis and routing?",
        "Where could autonomous monitoring and response add value?",
    ],
    "operations-maestro": [
        "What end-to-end operational processes span multiple systems?",
        "How do you coordinate between different operational teams?",
    ],
}

# (challenge, response)
LOB_OBJECTIONS: Dict[str, List[Tuple[str, str]]] = {
    "finance": [
        (
            "Our auditors won't accept automated controls.",
            "Every robot action is logged with inputs and outputs, which gives auditors "
            "a more complete trail than manual work.",
        ),
    ],
    "hr": [
        (
            "Employee data is too sensitive to automate.",
            "Credentials live in a vault, access is role-based, and personal data can be "
            "masked in logs.",
        ),
    ],
    "it": [
        (
            "IT already has a backlog; we can't support another platform.",
            "Central governance and a low-code toolset let business teams build within "
            "guardrails IT sets once.",
        ),
    ],
    "operations": [
        (
            "Our processes change too often to automate.",
            "Start with the stable core of the process and route variations to people "
            "until they settle.",
        ),
    ],
    "customer-service": [
        (
            "Customers want to talk to people, not bots.",
            "Automation handles the desktop work behind the call so agents spend more "
            "time with the customer.",
        ),
    ],
    "procurement": [
        (
            "Our suppliers won't change how they send documents.",
            "Document understanding reads supplier formats as they are, without asking "
            "suppliers to change.",
        ),
    ],
    "legal": [
        (
            "Legal review can't be delegated to software.",
            "Automation prepares and triages; lawyers keep every decision, with more time "
            "for the ones that matter.",
        ),
    ],
    "compliance": [
        (
            "Regulators will question automated decisions.",
            "Decisions follow documented rules with human approval points and a full "
            "audit trail for examiners.",
        ),
    ],
}

PROJECT_TYPE_OBJECTIONS: Dict[str, List[Tuple[str, str]]] = {
    "rpa": [
        (
            "Bots break every time the UI changes.",
            "Modern selectors and API-first integration keep automations stable, and "
            "central monitoring flags failures immediately.",
        ),
    ],
    "idp": [
        (
            "Our documents are too varied for extraction to be accurate.",
            "Models are trained on your samples, and low-confidence fields go to a human "
            "validation step.",
        ),
    ],
    "agentic": [
        (
            "We can't let AI agents act without oversight.",
            "Agents run inside governed workflows with approval steps, limits, and full "
            "logging of every action.",
        ),
    ],
    "maestro": [
        (
            "Orchestrating across departments is a political problem, not a technical one.",
            "Shared process visibility gives every team the same facts, which shortens "
            "the hand-off discussions.",
        ),
    ],
}
