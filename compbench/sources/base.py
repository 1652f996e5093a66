from abc import ABC, abstractmethod

from compbench.models import EmploymentType, SalarySummary


class BenchmarkSource(ABC):
    @abstractmethod
    def entries(
        self,
        region: str | None = None,
        role: str | None = None,
        employment_type: EmploymentType | str | None = None,
    ) -> list[SalarySummary]:
        pass

    def lookup(
        self, region: str, role: str, employment_type: EmploymentType | str
    ) -> SalarySummary | None:
        found = self.entries(region, role, employment_type)
        return found[0] if found else None


def filter_entries(
    data: list[SalarySummary],
    region: str | None = None,
    role: str | None = None,
    employment_type: EmploymentType | str | None = None,
) -> list[SalarySummary]:
    results = data
    if region:
        results = [e for e in results if e.region == region]
    if role:
        results = [e for e in results if e.role == role]
    if employment_type:
        et = EmploymentType(employment_type)
        results = [e for e in results if e.employment_type == et]
    return results
