"""Populate a fresh database with demo accounts and postings.

Usage: python -m talenthub.seed

Existing rows (matched by email / title) are left untouched, so running it
twice is harmless.
"""

import logging

from sqlalchemy.orm import Session

from talenthub.config import settings
from talenthub.database import SessionLocal, init_db
from talenthub.models.application import Application
from talenthub.models.enums import ApplicationStatus, JobStatus, JobType, Role
from talenthub.models.job import Job
from talenthub.models.user import User
from talenthub.utils.dates import utc_now
from talenthub.utils.filesystem import ensure_data_dirs
from talenthub.utils.security import hash_password

logger = logging.getLogger("talenthub.seed")

DEMO_USERS = [
    {
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@talenthub.com",
        "password": "admin123",
        "role": Role.ADMIN,
        "location": "San Francisco, CA",
        "current_role": "System Administrator",
    },
    {
        "first_name": "John",
        "last_name": "Employer",
        "email": "employer@techcorp.com",
        "password": "employer123",
        "role": Role.EMPLOYER,
        "location": "New York, NY",
        "current_role": "HR Manager",
        "portfolio": "https://techcorp.com",
    },
    {
        "first_name": "Jane",
        "last_name": "Applicant",
        "email": "applicant@example.com",
        "password": "applicant123",
        "role": Role.APPLICANT,
        "phone": "+1234567892",
        "location": "Austin, TX",
        "experience": "3-5 years",
        "current_role": "Frontend Developer",
        "expected_salary": "$90,000",
        "portfolio": "https://jane-portfolio.com",
        "linkedin": "https://linkedin.com/in/jane-applicant",
    },
]

DEMO_JOBS = [
    {
        "title": "Senior Frontend Developer",
        "company": "TechCorp Inc.",
        "location": "San Francisco, CA",
        "type": JobType.FULL_TIME,
        "salary": "$120k - $160k",
        "description": "Build web applications with React and TypeScript. 5+ years of experience expected.",
        "requirements": "React, TypeScript, 5+ years experience",
        "benefits": "Health insurance, 401k, Remote work options",
        "remote": True,
    },
    {
        "title": "Product Manager",
        "company": "StartupXYZ",
        "location": "New York, NY",
        "type": JobType.FULL_TIME,
        "salary": "$130k - $180k",
        "description": "Lead product strategy with cross-functional teams. SaaS experience preferred.",
        "requirements": "3+ years product management",
        "benefits": "Equity, Health insurance",
        "remote": False,
    },
    {
        "title": "UX Designer",
        "company": "DesignStudio",
        "location": "Remote",
        "type": JobType.CONTRACT,
        "salary": "$80 - $100/hr",
        "description": "Design user experiences for web and mobile products.",
        "requirements": "Figma, user research, portfolio",
        "benefits": "Flexible hours",
        "remote": True,
    },
]


def _get_or_create_user(db: Session, data: dict) -> User:
    user = db.query(User).filter(User.email == data["email"]).first()
    if user:
        return user
    now = utc_now()
    fields = {k: v for k, v in data.items() if k not in ("password", "role")}
    user = User(
        **fields,
        password_hash=hash_password(data["password"]),
        role=data["role"].value,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.flush()
    logger.info("Created %s %s", data["role"].value.lower(), data["email"])
    return user


def seed(db: Session):
    _admin, employer, applicant = (_get_or_create_user(db, u) for u in DEMO_USERS)

    jobs = []
    for data in DEMO_JOBS:
        job = db.query(Job).filter(Job.title == data["title"], Job.employer_id == employer.id).first()
        if not job:
            now = utc_now()
            job = Job(
                **{**data, "type": data["type"].value},
                status=JobStatus.ACTIVE.value,
                employer_id=employer.id,
                created_at=now,
                updated_at=now,
            )
            db.add(job)
            db.flush()
            logger.info("Created job %s", job.title)
        jobs.append(job)

    first_job = jobs[0]
    exists = (
        db.query(Application)
        .filter(Application.job_id == first_job.id, Application.applicant_id == applicant.id)
        .first()
    )
    if not exists:
        now = utc_now()
        db.add(Application(
            job_id=first_job.id,
            applicant_id=applicant.id,
            status=ApplicationStatus.APPLIED.value,
            cover_letter="I am excited to apply for this position.",
            resume_path="resume-demo.pdf",
            created_at=now,
            updated_at=now,
        ))
        logger.info("Created application for %s", first_job.title)

    db.commit()


def main():
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(message)s")
    ensure_data_dirs()
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
