"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    AGENT = "agent"
    ADMIN = "admin"


class TicketStatus(str, Enum):
    OPEN = "open"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Department(str, Enum):
    RADIOLOGY = "Radiology"
    CARDIOLOGY = "Cardiology"
    EMERGENCY = "Emergency"
    LABORATORY = "Laboratory"
    PHARMACY = "Pharmacy"
    OTHER = "Other"


class Category(str, Enum):
    EQUIPMENT_ISSUE = "Equipment Issue"
    MRI_CALIBRATION = "MRI Machine Calibration"
    SOFTWARE_PROBLEM = "Software Problem"
    NETWORK_ISSUE = "Network Issue"
    ACCESS_REQUEST = "Access Request"
    GENERAL_INQUIRY = "General Inquiry"
    MAINTENANCE_REQUEST = "Maintenance Request"
    TRAINING_REQUEST = "Training Request"
    OTHER = "Other"


class EquipmentType(str, Enum):
    MRI_SCANNER = "MRI Scanner"
    CT_SCANNER = "CT Scanner"
    X_RAY = "X-Ray"
    ULTRASOUND = "Ultrasound"
    OTHER = "Other"


class AuditAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"
    PRIORITY_CHANGED = "priority_changed"
    ASSIGNED = "assigned"
    COMMENT_ADDED = "comment_added"
    ATTACHMENT_ADDED = "attachment_added"
    FEEDBACK_SUBMITTED = "feedback_submitted"


class FeedbackRating(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class NotificationType(str, Enum):
    SYSTEM = "system"
    TICKET = "ticket"
    MESSAGE = "message"
    FEEDBACK = "feedback"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
