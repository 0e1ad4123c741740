"""
Default values for content resolution.

Provides the fixed heuristics used by:
- resolver.py (backfill floor and order, always-relevant personas, generic fallbacks)
- relevance.py (priority weights and match bonuses)
"""

from typing import Dict, List

from compass.contexts.catalog.entries import CatalogEntry, EntryFamily, Persona, Resource

# Personas/resources below this count after the direct steps get backfilled
MINIMUM_POPULATION = 3

# General LOB buckets used for backfill, in order
BACKFILL_LOBS = ("finance", "it", "hr")

# Families with a minimum-population guarantee and an absolute fallback
GUARANTEED_FAMILIES = (EntryFamily.PERSONAS, EntryFamily.RESOURCES)

# Primary tags marking organization-wide technical decision makers
ALWAYS_RELEVANT_TAGS = ("technology-leadership", "ai-leadership")

# Relevance scoring
PRIORITY_WEIGHTS = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
VERTICAL_MATCH_BONUS = 2
LEVEL_MATCH_BONUS = 2

GENERIC_PERSONAS = (
    Persona(
        id="generic-executive-sponsor",
        title="Executive Sponsor",
        level="executive",
        priority="high",
        influence="decision-maker",
        description="Senior leader who owns the business outcome and approves the investment.",
        cares="Measurable business impact, risk, and time to value.",
        help="A phased automation program with a clear business case and governance.",
        tags={"primary": ["executive-leadership"]},
    ),
    Persona(
        id="generic-process-owner",
        title="Process Owner",
        level="manager",
        priority="medium",
        influence="influencer",
        description="Runs the day-to-day process targeted for automation.",
        cares="Throughput, error rates, and team workload.",
        help="Automation of repetitive steps with humans kept in the loop for exceptions.",
        tags={"primary": ["operations"]},
    ),
)

GENERIC_RESOURCES = (
    Resource(
        id="generic-automation-overview",
        title="Automation Platform Overview",
        resource_type="overview",
        priority="medium",
        description="Introductory overview of the automation platform and its components.",
        why="A safe starting point for any conversation.",
        tags={"primary": ["overview"]},
    ),
    Resource(
        id="generic-roi-framework",
        title="Automation ROI Framework",
        resource_type="calculator",
        priority="medium",
        description="Framework for estimating savings and payback of an automation program.",
        why="Every opportunity needs a business case.",
        tags={"primary": ["roi"]},
    ),
)

GENERIC_ENTRIES: Dict[EntryFamily, tuple] = {
    EntryFamily.PERSONAS: GENERIC_PERSONAS,
    EntryFamily.RESOURCES: GENERIC_RESOURCES,
    EntryFamily.USE_CASES: (),
}


def get_generic_entries(family: EntryFamily) -> List[CatalogEntry]:
    """Hand-authored fallback entries for a family (empty for use cases)."""
    return list(GENERIC_ENTRIES[EntryFamily.parse(family)])


def is_always_relevant(entry: CatalogEntry) -> bool:
    """True for personas tagged as organization-wide technology or AI leadership."""
    return entry.family == EntryFamily.PERSONAS and any(
        entry.has_tag(tag, group="primary") for tag in ALWAYS_RELEVANT_TAGS
    )

