from talenthub.models.user import User
from talenthub.models.job import Job
from talenthub.models.application import Application
from talenthub.models.enums import ApplicationStatus, JobStatus, JobType, Role

__all__ = ["User", "Job", "Application", "ApplicationStatus", "JobStatus", "JobType", "Role"]
