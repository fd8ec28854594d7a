"""StaffHub monthly payroll engine."""

__version__ = "0.1.0"
