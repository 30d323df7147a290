"""Domain enumerations for strong typing & validation."""
from enum import Enum

class ReferenceType(str, Enum):
    ORDER = "ORDER"
    ENTITY = "ENTITY"
    ENQUIRY = "ENQUIRY"

class TaskKind(str, Enum):
    CREATE_INVOICE = "CREATE_INVOICE"
    ARRANGE_PICKUP = "ARRANGE_PICKUP"
    COLLECT_PAYMENT = "COLLECT_PAYMENT"
    ASSIGN_CUSTOMER_TO_SALES_PERSON = "ASSIGN_CUSTOMER_TO_SALES_PERSON"
    CONVERT_ENQUIRY_TO_ORDER = "CONVERT_ENQUIRY_TO_ORDER"

class TaskStatus(str, Enum):
    ASSIGNED = "ASSIGNED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
