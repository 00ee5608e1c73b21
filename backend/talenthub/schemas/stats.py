from pydantic import BaseModel


class StatsOverview(BaseModel):
    total_users: int
    total_jobs: int
    total_applications: int
    users_by_role: dict[str, int]
    jobs_by_status: dict[str, int]
    applications_by_status: dict[str, int]


class ActivityItem(BaseModel):
    type: str
    id: int
    summary: str
    created_at: str


class ActivityFeed(BaseModel):
    items: list[ActivityItem]
