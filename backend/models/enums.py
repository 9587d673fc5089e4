from enum import Enum


class Industry(str, Enum):
    SERVICES = "Services"
    RETAIL = "Commerce / Retail"
    MANUFACTURING = "Industrie"
    HEALTHCARE = "Santé"
    FINANCE = "Finance / Assurance"
    REAL_ESTATE = "Immobilier"
    TECHNOLOGY = "Technologie"
    LOGISTICS = "Transport / Logistique"
    CONSTRUCTION = "BTP / Construction"
    OTHER = "Autre"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class SubmissionStatus(str, Enum):
    NARRATIVE_PENDING = "narrative_pending"
    COMPLETED = "completed"
