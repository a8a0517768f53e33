"""
Drives Module

Placement drives and their lifecycle:
- Eligibility rules shared by applying and the eligible-drives listing
- Admin-driven status transitions (open, closed, cancelled, on hold, completed)
- Home-page grouping (upcoming, ongoing, completed, on hold)

The reconciler in ``modules.lifecycle`` closes open drives once their
deadline passes.
"""
