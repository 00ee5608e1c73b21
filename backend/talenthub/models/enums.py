import enum

from talenthub.errors import ValidationError


class Role(str, enum.Enum):
    APPLICANT = "APPLICANT"
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"


class JobType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


class JobStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DRAFT = "DRAFT"
    # Moderation states
    FLAGGED = "FLAGGED"
    REJECTED = "REJECTED"


class ApplicationStatus(str, enum.Enum):
    APPLIED = "APPLIED"
    REVIEWED = "REVIEWED"
    SHORTLISTED = "SHORTLISTED"
    REJECTED = "REJECTED"
    HIRED = "HIRED"


# Values an employer or admin may set through the status endpoint.
SETTABLE_APPLICATION_STATUSES = (
    ApplicationStatus.APPLIED,
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.HIRED,
)


def parse_enum(enum_cls, value, label: str, list_key: str = "valid_values", allowed=None):
    """Parse a case-insensitive string into a member of ``enum_cls``.

    Raises ValidationError naming the valid values when ``value`` is not one
    of them (or not one of ``allowed`` when given).
    """
    choices = list(allowed) if allowed is not None else list(enum_cls)
    valid = [c.value for c in choices]
    if isinstance(value, enum_cls):
        member = value
    else:
        try:
            member = enum_cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Invalid {label}", **{list_key: valid})
    if member not in choices:
        raise ValidationError(f"Invalid {label}", **{list_key: valid})
    return member


def parse_optional_filter(enum_cls, value, label: str, list_key: str = "valid_values"):
    """Parse a list filter where None, "" and "all" mean "no filter"."""
    if value is None or value == "" or str(value).lower() == "all":
        return None
    return parse_enum(enum_cls, value, label, list_key)
