"""Access rules for every operation, in one place.

``can_act`` is a pure function of (actor, action, resource); handlers call
``authorize`` which raises ForbiddenError when the answer is no.
"""

import enum

from talenthub.errors import ForbiddenError
from talenthub.models.enums import Role


class Action(str, enum.Enum):
    READ_JOBS = "read_jobs"
    READ_JOB = "read_job"
    CREATE_JOB = "create_job"
    LIST_OWN_JOBS = "list_own_jobs"
    UPDATE_JOB = "update_job"
    DELETE_JOB = "delete_job"
    APPLY = "apply"
    LIST_OWN_APPLICATIONS = "list_own_applications"
    CHECK_APPLICATION = "check_application"
    LIST_JOB_APPLICATIONS = "list_job_applications"
    READ_APPLICATION = "read_application"
    UPDATE_APPLICATION_STATUS = "update_application_status"
    LIST_USERS = "list_users"
    READ_USER = "read_user"
    CHANGE_ROLE = "change_role"
    DELETE_USER = "delete_user"
    VIEW_STATS = "view_stats"
    VIEW_ACTIVITY = "view_activity"


PUBLIC_ACTIONS = {Action.READ_JOBS, Action.READ_JOB}

ROLE_ACTIONS = {
    Role.APPLICANT: {Action.APPLY, Action.LIST_OWN_APPLICATIONS, Action.CHECK_APPLICATION},
    Role.EMPLOYER: {Action.CREATE_JOB, Action.LIST_OWN_JOBS},
    Role.ADMIN: {
        Action.LIST_USERS,
        Action.READ_USER,
        Action.CHANGE_ROLE,
        Action.DELETE_USER,
        Action.VIEW_STATS,
        Action.VIEW_ACTIVITY,
    },
}

# Resource is the job; allowed for its employer or any admin.
JOB_OWNER_ACTIONS = {
    Action.UPDATE_JOB,
    Action.DELETE_JOB,
    Action.LIST_JOB_APPLICATIONS,
    Action.UPDATE_APPLICATION_STATUS,
}

SELF_PROTECTED_ACTIONS = {Action.CHANGE_ROLE, Action.DELETE_USER}


def is_admin(actor) -> bool:
    return actor is not None and actor.role == Role.ADMIN


def owns_job(actor, job) -> bool:
    return actor is not None and job is not None and job.employer_id == actor.id


def can_act(actor, action: Action, resource=None) -> bool:
    if action in PUBLIC_ACTIONS:
        return True
    if actor is None:
        return False

    if action in SELF_PROTECTED_ACTIONS and resource is not None and resource.id == actor.id:
        return False

    if action in JOB_OWNER_ACTIONS:
        return is_admin(actor) or owns_job(actor, resource)

    if action == Action.READ_APPLICATION:
        if resource is None:
            return False
        return (
            is_admin(actor)
            or resource.applicant_id == actor.id
            or owns_job(actor, resource.job)
        )

    return action in ROLE_ACTIONS.get(Role(actor.role), set())


def authorize(actor, action: Action, resource=None, message: str = "Not authorized to perform this action"):
    if not can_act(actor, action, resource):
        raise ForbiddenError(message)
