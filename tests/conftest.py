from typing import Dict

import pytest

from strata import DictLoader, TemplateEngine


@pytest.fixture
def templates() -> Dict[str, str]:
    """In-memory template sources; tests add entries before compiling."""
    return {}


@pytest.fixture
def engine(templates) -> TemplateEngine:
    """Engine with the built-in tags and filters and a DictLoader over ``templates``."""
    return TemplateEngine(loader=DictLoader(templates))
