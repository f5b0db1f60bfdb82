from enum import Enum


class TableNames(str, Enum):
    TENANTS = "tenants"
    OPERATORS = "operators"
    GUESTS = "guests"
    TAGS = "tags"
    GUEST_TAGS = "guest_tags"
