"""
COMPASS - Context-Oriented Matching of Personas, Assets, and Sales Scripts

The context-driven content resolution core of a sales-enablement guide. Given a
selection context (vertical, line of business, customer type, deployment, project
types) it resolves which curated content applies and keeps the user's picks.

Architecture:
- Catalog Context: Curated personas, resources, and use cases keyed by vertical and LOB
- Targeting Context: Selection context, fallback resolution chain, and relevance ranking
- Selections Context: Context-scoped persistence of manually selected entries
- Discovery Context: Stage baselines and context-derived question/objection overlays
"""

__version__ = "0.1.0"
