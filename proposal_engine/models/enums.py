"""Enumeration types for the proposal engine."""

from enum import Enum


class SectionStatus(str, Enum):
    """Completeness verdict the parser assigns to each tracked section."""
    COMPLETE = "complete"
    WEAK = "weak"
    MISSING = "missing"


class GapStatus(str, Enum):
    """Status of a section that still needs enrichment."""
    WEAK = "weak"
    MISSING = "missing"


class OverallStatus(str, Enum):
    """Parser's aggregate verdict across all tracked sections."""
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class TurnRole(str, Enum):
    """Speaker of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"


class GenerationStatus(str, Enum):
    """Outcome of a generation entry point."""
    COMPLETE = "complete"
    NEEDS_ENRICHMENT = "needs_enrichment"


class IconName(str, Enum):
    """Icon identifiers a feature may reference."""
    ZAP = "Zap"
    TRENDING_UP = "TrendingUp"
    WORKFLOW = "Workflow"
    PLUG = "Plug"
    SHIELD = "Shield"
    BRAIN = "Brain"
    CHECK_CIRCLE = "CheckCircle"
    X_CIRCLE = "XCircle"
    ALERT_CIRCLE = "AlertCircle"
    INFO = "Info"
    CALENDAR = "Calendar"
    MAIL = "Mail"
    PHONE = "Phone"
    MAP_PIN = "MapPin"
    CLOCK = "Clock"
    USERS = "Users"
    STAR = "Star"
    GLOBE = "Globe"
    LINKEDIN = "Linkedin"
    CODE2 = "Code2"
    DOLLAR_SIGN = "DollarSign"


# ===========================================
# Presentation variants per section
# ===========================================

class ExecutiveSummaryVariant(str, Enum):
    BRIEF = "brief"
    DETAILED = "detailed"
    VISUAL = "visual"
    TIMELINE = "timeline"


class NeedsVariant(str, Enum):
    LIST = "list"
    GRID = "grid"
    CARDS = "cards"
    TIMELINE = "timeline"


class SolutionVariant(str, Enum):
    NARRATIVE = "narrative"
    STRUCTURED = "structured"
    VISUAL = "visual"
    COMPARISON = "comparison"


class FeaturesVariant(str, Enum):
    GRID = "grid"
    LIST = "list"
    SHOWCASE = "showcase"
    TABBED = "tabbed"


class RoadmapVariant(str, Enum):
    TIMELINE = "timeline"
    PHASES = "phases"
    GANTT = "gantt"
    MILESTONES = "milestones"


class WhyUsVariant(str, Enum):
    LIST = "list"
    GRID = "grid"
    TESTIMONIAL = "testimonial"
    STATS = "stats"


class PricingVariant(str, Enum):
    TIERS = "tiers"
    TABLE = "table"
    CUSTOM = "custom"
    SIMPLE = "simple"


class ContactVariant(str, Enum):
    STANDARD = "standard"
    CARD = "card"
    INLINE = "inline"
    FOOTER = "footer"
