from sqlalchemy import func
from sqlalchemy.orm import Session

from talenthub.models.application import Application
from talenthub.models.job import Job
from talenthub.models.user import User
from talenthub.policy import Action, authorize

ADMIN_ONLY = "Admin access required"


def _group_counts(db: Session, column) -> dict[str, int]:
    rows = db.query(column, func.count()).group_by(column).all()
    return {value: n for value, n in rows}


def overview(db: Session, actor: User) -> dict:
    authorize(actor, Action.VIEW_STATS, message=ADMIN_ONLY)

    users_by_role = _group_counts(db, User.role)
    jobs_by_status = _group_counts(db, Job.status)
    applications_by_status = _group_counts(db, Application.status)

    return {
        "total_users": sum(users_by_role.values()),
        "total_jobs": sum(jobs_by_status.values()),
        "total_applications": sum(applications_by_status.values()),
        "users_by_role": users_by_role,
        "jobs_by_status": jobs_by_status,
        "applications_by_status": applications_by_status,
    }


def recent_activity(db: Session, actor: User, limit: int = 10) -> list[dict]:
    """Latest registrations, postings and submissions merged newest-first."""
    authorize(actor, Action.VIEW_ACTIVITY, message=ADMIN_ONLY)

    items = []
    for user in db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(limit):
        items.append({
            "type": "user_registered",
            "id": user.id,
            "summary": f"{user.full_name} joined as {user.role.lower()}",
            "created_at": user.created_at,
        })
    for job in db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).limit(limit):
        items.append({
            "type": "job_posted",
            "id": job.id,
            "summary": f"{job.company} posted {job.title}",
            "created_at": job.created_at,
        })
    for app in db.query(Application).order_by(Application.created_at.desc(), Application.id.desc()).limit(limit):
        items.append({
            "type": "application_submitted",
            "id": app.id,
            "summary": f"{app.applicant.full_name} applied to {app.job.title}",
            "created_at": app.created_at,
        })

    items.sort(key=lambda item: item["created_at"], reverse=True)
    return items[:limit]
