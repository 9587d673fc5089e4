"""Shared test fixtures for the ROI calculator test suite."""

import pytest

from backend.engine.calculator import CalculationEngine, build_chart_data
from backend.models.enums import Industry
from backend.models.inputs import CalculatorInputs


@pytest.fixture
def engine() -> CalculationEngine:
    return CalculationEngine()


@pytest.fixture
def reference_inputs() -> CalculatorInputs:
    """Form defaults: 10 employees, 25 EUR/h, 5 h/week of repetitive work."""
    return CalculatorInputs(
        employees=10,
        hourly_wage=25,
        hours_repetitive=5,
        industry=Industry.SERVICES,
    )


@pytest.fixture
def no_repetitive_work() -> CalculatorInputs:
    return CalculatorInputs(
        employees=1,
        hourly_wage=15,
        hours_repetitive=0,
        industry=Industry.RETAIL,
    )


@pytest.fixture
def reference_result(engine, reference_inputs):
    return engine.calculate(reference_inputs)


@pytest.fixture
def reference_chart(reference_result):
    return build_chart_data(reference_result)


SAMPLE_NARRATIVE = """\
**1. Recommandations Personnalisées**
- Automatiser la saisie des devis
- Centraliser le reporting **hebdomadaire**

**2. Analyse Sectorielle**
Le secteur des services adopte rapidement l'IA générative.
- ROI moyen observé : 3 à 5x

**3. Points d'Amélioration**
- Quick wins : modèles d'emails
"""


@pytest.fixture
def sample_narrative() -> str:
    return SAMPLE_NARRATIVE
