import datetime as dt
from typing import Optional
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import (
    String, Integer, Boolean, Text, Date, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.dialects.postgresql import TIMESTAMP


class Base(DeclarativeBase):
    pass


# Postgres TIMESTAMP WITH TIME ZONE, generic DateTime elsewhere (SQLite tests)
TIMESTAMP_TYPE = DateTime(timezone=True).with_variant(TIMESTAMP(timezone=True), 'postgresql')

# --- Teams & Employees ---

class PlacementTeamModel(Base):
    __tablename__ = "placement_teams"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str] = mapped_column(String, server_default='#6B7280')
    is_active: Mapped[bool] = mapped_column(Boolean, server_default='1', index=True)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())


class EmployeeModel(Base):
    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, server_default='')
    email: Mapped[Optional[str]] = mapped_column(String)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())


class TeamMemberModel(Base):
    __tablename__ = "placement_team_members"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    team_id: Mapped[str] = mapped_column(ForeignKey("placement_teams.id"), nullable=False, index=True)
    employee_id: Mapped[str] = mapped_column(ForeignKey("employees.id"), nullable=False, index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, server_default='0')
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

    employee: Mapped["EmployeeModel"] = relationship()

    __table_args__ = (
        UniqueConstraint('team_id', 'employee_id', name='uq_team_member'),
    )

# --- Daily assignments ---

class DailyTeamAssignmentModel(Base):
    __tablename__ = "daily_team_assignments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    employee_id: Mapped[str] = mapped_column(ForeignKey("employees.id"), nullable=False, index=True)
    team_id: Mapped[str] = mapped_column(ForeignKey("placement_teams.id"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    is_available: Mapped[bool] = mapped_column(Boolean, server_default='1')
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('employee_id', 'team_id', 'date', name='uq_daily_assignment_key'),
    )

# --- Holidays ---

class HolidayModel(Base):
    __tablename__ = "holidays"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    scope: Mapped[str] = mapped_column(String, nullable=False, server_default='employee')
    subject_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, server_default='pending', index=True)
    reason: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

# --- Bookings ---

class TeamBookingModel(Base):
    __tablename__ = "project_team_assignments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    project_name: Mapped[Optional[str]] = mapped_column(String)
    team_id: Mapped[Optional[str]] = mapped_column(ForeignKey("placement_teams.id"), nullable=True, index=True)
    # Free-text team reference from before team_id existed
    legacy_team_name: Mapped[Optional[str]] = mapped_column(String)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, server_default='1')
    start_hour: Mapped[Optional[int]] = mapped_column(Integer)
    end_hour: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('duration >= 1', name='ck_booking_duration_positive'),
    )
