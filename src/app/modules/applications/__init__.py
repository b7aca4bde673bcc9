"""
Admission Applications Module

Handles the candidate admission workflow:
1. Application intake, one application per matricule + program
2. Education / family details and supporting documents
3. Submission with completeness checks
4. Review statuses up to STUDENT, which assigns the final matricule

API Endpoints:
- /applications - Candidate endpoints (see router.py)
- /admin/applications - Admissions office endpoints (see admin_router.py)

Side effects of status changes:
- Status email to the candidate (Resend)
- Matricule sync with the candidate directory service on STUDENT
"""

from .router import router

__all__ = ["router"]
