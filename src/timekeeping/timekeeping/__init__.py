"""Home-care Time Keeping package.

Check-in/check-out sessions with GPS, weekly aggregation in the agency's time
zone, and the supervised adjust/approve/unlock workflow with its audit trail.
Organized by feature modules (attendance, summary, approvals, audit, payroll)
with a thin Flask controller layer over service/repository layers.
"""
