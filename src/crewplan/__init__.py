"""
crewplan - Installation crew scheduling engine

This package contains the scheduling core used by the production-management
application to plan installation teams against project bookings:
- scheduling: calendar ranges, bar positions, overlap detection/resolution,
  auto-assignment of permanent team members to daily rows
- storage: SQLAlchemy adapter, models, repositories and SQL-backed stores
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
