from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import SalaryBreakdown, SalaryInputs


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for salary rules)."""

    @abstractmethod
    def calculate(self, inputs: SalaryInputs) -> SalaryBreakdown:
        raise NotImplementedError
