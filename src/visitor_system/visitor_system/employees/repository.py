from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def list_all(self) -> Sequence[Employee]:
        """Employees joined with company/department/designation names."""

        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, *, fields: Dict[str, Any]) -> int:
        """``fields`` maps column name -> value; ``password`` already hashed."""

        raise NotImplementedError

    def update(self, *, employee_id: int, fields: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError
