"""Dashboard schemas for signup metrics."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SignupSummary(BaseModel):
    id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    source: str
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None


class DashboardMetrics(BaseModel):
    signupsToday: int
    signupsThisWeek: int
    signupsThisMonth: int
    totalClients: int
    clientsByStatus: Dict[str, int]
    clientsBySource: Dict[str, int]
    lastSignups: List[SignupSummary]
