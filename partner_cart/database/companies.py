"""Partner company registry"""

from typing import Optional

COMPANIES: dict[str, dict] = {
    "comp-001": {"company_name": "Adriatic Solar Installations", "status": "approved"},
    "comp-002": {"company_name": "GreenVolt Partners", "status": "approved"},
    "comp-003": {"company_name": "Sunrise Roofing", "status": "pending"},
}


class CompanyDatabase:
    """In-memory company registry"""

    def __init__(self):
        self.companies = {cid: dict(data) for cid, data in COMPANIES.items()}

    def get_company_name(self, company_id: str) -> Optional[str]:
        """Name of an approved company, None otherwise"""
        company = self.companies.get(company_id)
        if not company or company["status"] != "approved":
            return None
        return company["company_name"]

    def is_approved(self, company_id: str) -> bool:
        return self.get_company_name(company_id) is not None


# Singleton instance
company_db = CompanyDatabase()
